"""Wire models for the MI API.

Field names are snake_case in Python and camelCase on the wire. Every record
rejects unknown fields, except the error body which is matched loosely.
"""

from enum import StrEnum
from typing import Annotated, Literal

from pydantic import AfterValidator, AnyUrl, BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr, TypeAdapter
from pydantic.alias_generators import to_camel

_url_adapter = TypeAdapter(AnyUrl)


def _validate_url(value: str) -> str:
    _url_adapter.validate_python(value)
    return value


UrlStr = Annotated[str, AfterValidator(_validate_url)]
IsoDate = Annotated[str, Field(pattern=r"^\d{4}-\d{2}-\d{2}$")]
# page;x;y;w;h
BBox = Literal[""] | Annotated[str, Field(pattern=r"^\d+(?:;-?\d+(?:\.\d+)?){4}$")]
# Booleans are neither text nor numbers
Scalar = StrictStr | StrictInt | StrictFloat


class WireModel(BaseModel):
    """Strict, immutable record with camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        frozen=True,
        protected_namespaces=(),
    )


class MIFileType(StrEnum):
    """File types accepted by submit_task."""

    PDF = "pdf"
    XLSX = "xlsx"
    XLS = "xls"
    XLSM = "xlsm"
    DOC = "doc"
    DOCX = "docx"
    PPT = "ppt"
    PPTX = "pptx"

    @property
    def mime_type(self) -> str:
        return MIME_TYPES[self]


MIME_TYPES: dict[MIFileType, str] = {
    MIFileType.PDF: "application/pdf",
    MIFileType.XLSX: "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    MIFileType.XLS: "application/vnd.ms-excel",
    MIFileType.XLSM: "application/vnd.ms-excel.sheet.macroEnabled.12",
    MIFileType.DOC: "application/msword",
    MIFileType.DOCX: "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    MIFileType.PPT: "application/vnd.ms-powerpoint",
    MIFileType.PPTX: "application/vnd.openxmlformats-officedocument.presentationml.presentation",
}


class TaskStatus(StrEnum):
    SUCCESS = "SUCCESS"
    DELETED = "DELETED"
    PENDING_UPLOAD = "PENDING_UPLOAD"
    PROCESSING = "PROCESSING"


class MITask(WireModel):
    """A submitted document and its processing state."""

    jobid: str
    client: str
    company_name: str | None = None
    client_filename: str | None = None
    original_filename: str | None = None
    client_model_filename: str | None = None
    model_filename: str | None = None
    status: TaskStatus
    submitted: Annotated[int, Field(gt=0, strict=True)]
    model_url: UrlStr | None = None


class _PortfolioItemBase(WireModel):
    client: str
    company_name: str
    jobids: list[str]


class MIPortfolioItemWithFilename(_PortfolioItemBase):
    model_filename: str | None = None


class MIPortfolioItemWithUrl(_PortfolioItemBase):
    model_url: UrlStr | None = None


MIPortfolioItem = Annotated[
    MIPortfolioItemWithFilename | MIPortfolioItemWithUrl,
    Field(union_mode="left_to_right"),
]


class ItemValue(WireModel):
    value: Scalar
    bbox: BBox | None = None


class Item(WireModel):
    """One extracted line item, with values keyed by period or column."""

    tag: str
    term: str
    ogterm: str
    values: dict[str, Annotated[Scalar | ItemValue, Field(union_mode="left_to_right")]]


class MIModelFinancials(WireModel):
    """Financial statement model extracted from a company report."""

    company: Annotated[str, Field(min_length=1)]
    date_reporting: IsoDate
    covering: str
    items: list[Item]


class ModelTable(WireModel):
    title: str
    columns_order: list[str]
    items: list[Item]


class MIModelFundPerformance(WireModel):
    """Fund performance tables, also used for consolidated portfolios."""

    date: IsoDate
    tables: list[ModelTable]


MIModel = MIModelFinancials | MIModelFundPerformance

MODEL_SHAPES: tuple[type[MIModelFinancials] | type[MIModelFundPerformance], ...] = (
    MIModelFinancials,
    MIModelFundPerformance,
)
"""Model shapes in match order. The first shape that validates wins."""

MICollatedModelFundPerformance = MIModelFundPerformance


class SubmitTaskRequest(WireModel):
    filetype: MIFileType
    filename: str | None = None
    companyname: str | None = None
    md5checksum: str


class PostSubmitMIOutput(WireModel):
    jobid: str
    url: UrlStr


class GetListMIsOutput(WireModel):
    tasks: list[MITask]


GetMIOutput = MITask
DeleteMIOutput = MITask


class GetPortfolioFundPerformanceOutput(WireModel):
    model: MIModelFundPerformance


class ErrorResponse(BaseModel):
    """Error body returned by the API for non-200 responses."""

    error_type: str = Field(alias="errorType")
    error_message: str = Field(alias="errorMessage")
