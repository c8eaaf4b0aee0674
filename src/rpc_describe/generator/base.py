"""OpenRPC document models produced by the generator."""

from pydantic import BaseModel, ConfigDict, Field

from rpc_describe.schema.base import SchemaNode

OPENRPC_VERSION = "1.2.4"
PARAM_STRUCTURE = "by-position"


class Contact(BaseModel):
    name: str = ""
    url: str = ""
    email: str = ""


class License(BaseModel):
    name: str = "Apache-2.0"
    url: str = "https://www.apache.org/licenses/LICENSE-2.0.html"


class Info(BaseModel):
    """Fixed API metadata block."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = "Ethereum JSON-RPC"
    description: str = "This API lets you interact with an EVM-based client via JSON-RPC"
    terms_of_service: str = Field(
        "https://github.com/etclabscore/core-geth/blob/master/COPYING",
        alias="termsOfService",
    )
    contact: Contact = Field(default_factory=Contact)
    license: License = Field(default_factory=License)
    version: str = "1.0.10"


class ExternalDocs(BaseModel):
    description: str = ""
    url: str = ""


class ContentDescriptor(BaseModel):
    """A named, schema-attached parameter or result."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    summary: str | None = None
    description: str | None = None
    schema_: SchemaNode = Field(default_factory=SchemaNode, alias="schema")


class MethodDescriptor(BaseModel):
    """One described method, keyed by its qualified name."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    summary: str = ""
    description: str | None = None
    params: list[ContentDescriptor] = []
    result: ContentDescriptor
    param_structure: str = Field(PARAM_STRUCTURE, alias="paramStructure")
    external_docs: ExternalDocs | None = Field(None, alias="externalDocs")

    def content_descriptors(self) -> list[ContentDescriptor]:
        """Parameters in declaration order, then the result."""
        return [*self.params, self.result]


class Components(BaseModel):
    schemas: dict[str, SchemaNode] = {}


class Document(BaseModel):
    """A complete API description."""

    model_config = ConfigDict(populate_by_name=True)

    openrpc: str = OPENRPC_VERSION
    info: Info = Field(default_factory=Info)
    servers: list[dict] = []
    methods: list[MethodDescriptor] = []
    components: Components = Field(default_factory=Components)
    external_docs: ExternalDocs | None = Field(None, alias="externalDocs")

    def method_names(self) -> list[str]:
        return [m.name for m in self.methods]

    def find_method(self, name: str) -> MethodDescriptor | None:
        for method in self.methods:
            if method.name == name:
                return method
        return None

    def to_dict(self) -> dict:
        """Serialize to the OpenRPC document shape."""
        return self.model_dump(by_alias=True, exclude_none=True)
