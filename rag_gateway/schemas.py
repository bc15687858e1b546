from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from rag_gateway.operations import Operation, get_spec


class GatewayRequest(BaseModel):
    """Validated, canonical request handed to the backend client."""

    model_config = ConfigDict(frozen=True)

    operation: Operation
    mode: Optional[str] = None
    k: int = Field(..., ge=1)
    payload: dict[str, str] = Field(default_factory=dict)

    def query_params(self) -> dict[str, str]:
        params = {"q": self.payload["q"], "k": str(self.k)}
        if self.payload.get("sourcePrefix"):
            params["sourcePrefix"] = self.payload["sourcePrefix"]
        return params

    def json_body(self) -> dict[str, Any]:
        schema = get_spec(self.operation).schema_for(self.mode)
        body: dict[str, Any] = {}
        if self.mode is not None:
            body["mode"] = self.mode
        for name in schema.required:
            body[name] = self.payload[name]
        body["k"] = self.k
        for name in schema.optional:
            if self.payload.get(name):
                body[name] = self.payload[name]
        return body
