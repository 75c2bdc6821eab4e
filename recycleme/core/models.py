from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

# material name -> bin label, as sent by the server
ThrowAwayMap = Dict[str, str]

# bin label -> material names, in first-seen order
BinGroups = Dict[str, List[str]]


class DecodedBarcode(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: str
    symbology: str = ""


class Material(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str


class Product(BaseModel):
    """A product as described by the server. Replaced wholesale, never edited."""
    model_config = ConfigDict(frozen=True)

    ean: str
    name: str
    url: str = ""  # page the product was found on
    image_url: str = ""
    website_name: str = ""
    website_url: str = ""
    materials: List[Material] = Field(default_factory=list)


class FetchPayload(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    throw_away: ThrowAwayMap = Field(default_factory=dict, alias="throwAway")
    product: Product


class MaterialOptions(BaseModel):
    materials: List[Material] = Field(default_factory=list)
    selected_ids: List[int] = Field(default_factory=list)


class WorkflowState(str, Enum):
    IDLE = "Idle"
    LOADING = "Loading"
    ERROR_DISPLAYED = "ErrorDisplayed"


class RenderKind(str, Enum):
    CLEAR = "clear"
    FILL_BARCODE = "fill_barcode"
    SHOW_BINS = "show_bins"
    SHOW_NO_DATA = "show_no_data"
    SHOW_ERROR = "show_error"


class RenderInstruction(BaseModel):
    """One display update emitted by the workflow per state transition."""
    model_config = ConfigDict(frozen=True)

    kind: RenderKind
    product: Optional[Product] = None
    bins: BinGroups = Field(default_factory=dict)
    column_width: Optional[int] = None
    message: str = ""
    barcode: str = ""
