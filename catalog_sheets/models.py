# catalog_sheets/models.py
# Request payloads, one model per action, discriminated by "action".
from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, ValidationError

from catalog_sheets.errors import InvalidRequest

TabName = Annotated[str, StringConstraints(min_length=1, max_length=254)]
RowCell = Annotated[str, StringConstraints(max_length=9999)]
CategoryPath = Annotated[str, StringConstraints(min_length=1, max_length=999)]
Trimmed255 = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
Url = Annotated[str, StringConstraints(max_length=1999)]


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class TabNames(_Payload):
    """Per-request tab renames; unknown keys (e.g. legacy "PRODUCTS") are ignored."""
    PRODUCTS_TODO: Optional[TabName] = None
    CATEGORIES: Optional[TabName] = None
    PROPERTIES: Optional[TabName] = None
    LEGAL: Optional[TabName] = None
    BRANDS: Optional[TabName] = None
    FILTER: Optional[TabName] = None
    FILTER_DEFAULTS: Optional[TabName] = None
    RESPONSES: Optional[TabName] = None

    def as_dict(self) -> Dict[str, str]:
        return {k: v for k, v in self.model_dump().items() if v}


class _ActionRequest(_Payload):
    tab_names: Optional[TabNames] = Field(None, alias="tabNames")

    def tab_overrides(self) -> Dict[str, str]:
        return self.tab_names.as_dict() if self.tab_names else {}


class ReadRequest(_ActionRequest):
    action: Literal["read"]


class WriteRowRequest(_ActionRequest):
    action: Literal["write"]
    row_data: List[RowCell] = Field(..., alias="rowData")


class WriteCategoriesRequest(_ActionRequest):
    action: Literal["write-categories"]
    category_paths: List[CategoryPath] = Field(..., alias="categoryPaths")


class BrandIn(_Payload):
    brand: Annotated[str, StringConstraints(min_length=1, max_length=254)]
    brand_name: Annotated[str, StringConstraints(max_length=254)] = Field("", alias="brandName")
    website: Url = ""


class WriteBrandsRequest(_ActionRequest):
    action: Literal["write-brands"]
    brands: List[BrandIn]


class WriteLegalRequest(_ActionRequest):
    action: Literal["write-legal"]
    property_name: Trimmed255 = Field(..., alias="propertyName")
    value: Trimmed255


class SetVisibilityRequest(_ActionRequest):
    action: Literal["set-visibility"]
    sku: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=254)]
    visible: int = Field(..., ge=0, le=99)


class SubmitProductRequest(_ActionRequest):
    """Structured product submission, flattened server-side into one RESPONSES row."""
    action: Literal["submit"]
    sku: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=254)]
    brand: Annotated[str, StringConstraints(max_length=254)] = ""
    title: RowCell = ""
    main_category: CategoryPath = Field(..., alias="mainCategory")
    additional_categories: List[CategoryPath] = Field(default_factory=list, alias="additionalCategories")
    image_urls: List[Url] = Field(default_factory=list, alias="imageUrls")
    specifications: Dict[str, RowCell] = Field(default_factory=dict)
    chatgpt_data: RowCell = Field("", alias="chatgptData")
    chatgpt_description: RowCell = Field("", alias="chatgptDescription")
    datasheet_url: Url = Field("", alias="datasheetUrl")
    webpage_url: Url = Field("", alias="webpageUrl")
    timestamp: Optional[Annotated[str, StringConstraints(max_length=64)]] = None


SheetRequest = Annotated[
    Union[
        ReadRequest,
        WriteRowRequest,
        WriteCategoriesRequest,
        WriteBrandsRequest,
        WriteLegalRequest,
        SetVisibilityRequest,
        SubmitProductRequest,
    ],
    Field(discriminator="action"),
]

ACTION_MODELS: Dict[str, Type[_ActionRequest]] = {
    "read": ReadRequest,
    "write": WriteRowRequest,
    "write-categories": WriteCategoriesRequest,
    "write-brands": WriteBrandsRequest,
    "write-legal": WriteLegalRequest,
    "set-visibility": SetVisibilityRequest,
    "submit": SubmitProductRequest,
}


def _offending_field(err: ValidationError) -> str:
    for e in err.errors():
        loc = e.get("loc") or ()
        if loc:
            return str(loc[0])
    return "request"


def parse_request(body: Any) -> SheetRequest:
    """Validate a decoded JSON body into its action model, or raise InvalidRequest."""
    if not isinstance(body, dict):
        raise InvalidRequest("Invalid request body")
    action = body.get("action")
    model = ACTION_MODELS.get(action) if isinstance(action, str) else None
    if model is None:
        raise InvalidRequest("Invalid action", field="action")
    try:
        return model.model_validate(body)
    except ValidationError as e:
        name = _offending_field(e)
        raise InvalidRequest(f"Invalid {name} parameter", field=name) from e
