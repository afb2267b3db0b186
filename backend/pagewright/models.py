from pydantic import BaseModel, Field, ValidationError
from typing import Any, Optional, List, Literal

IntentType = Literal["micro", "semantic", "abstract"]
BuildMode = Literal["generate", "edit"]
OpType = Literal[
    "replace", "replace_all", "insert_before", "insert_after", "delete", "set_css"
]


class IntentClassification(BaseModel):
    intent: IntentType
    confidence: float = Field(ge=0.0, le=1.0)
    reasoning: str


class EditOperation(BaseModel):
    op: OpType
    target: str
    value: Optional[str] = None


class EditCommandResponse(BaseModel):
    ops: List[EditOperation] = Field(default_factory=list)


def validate_edit_response(data: Any) -> Optional[EditCommandResponse]:
    """Validate untrusted model output as a whole.

    Returns the parsed response, or None when any part of it is invalid.
    Elements are never filtered one by one.
    """
    if not isinstance(data, dict) or not isinstance(data.get("ops"), list):
        return None
    try:
        return EditCommandResponse.model_validate(data)
    except ValidationError:
        return None


class ChatMessage(BaseModel):
    role: Literal["system", "user", "assistant"]
    content: str


class StyleProfile(BaseModel):
    font_family: Optional[str] = None
    spacing_density: Optional[Literal["compact", "normal", "relaxed"]] = None
    color_tone: Optional[Literal["light", "dark", "vibrant", "muted"]] = None
    border_style: Optional[Literal["sharp", "rounded", "none"]] = None


class LayoutIntent(BaseModel):
    layout: str
    style: str
    mood: str


class GenerateHtmlRequest(BaseModel):
    messages: List[ChatMessage] = Field(default_factory=list)
    currentHtml: str = ""
    userMessage: Optional[str] = None
    model: Optional[str] = None
    reasoning: bool = False


class GenerateHtmlResponse(BaseModel):
    html: str
    mode: BuildMode
    intent: Optional[IntentType] = None
    confidence: Optional[float] = None
    editsApplied: int = 0
    message: str


class ClassifyRequest(BaseModel):
    instruction: str


class ApplyEditsRequest(BaseModel):
    html: str
    ops: List[EditOperation] = Field(default_factory=list)


class ApplyEditsResponse(BaseModel):
    html: str
    editsApplied: int
