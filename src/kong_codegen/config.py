"""Gateway options: Kong admin host/port and the service name to register."""

import json
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict

from kong_codegen.errors import KongCodegenError

KONG_HOST = "kongHost"
KONG_PORT = "kongPort"
TARGET_API_NAME = "targetApiName"

DEFAULTS = {
    KONG_HOST: "localhost",
    KONG_PORT: "8001",
    TARGET_API_NAME: "myApi",
}

OPTION_HELP = {
    KONG_HOST: "The host where kong API gateway is running on.",
    KONG_PORT: "The port where kong API gateway is running on.",
    TARGET_API_NAME: "The API name that should be registered in kong.",
}


class GatewayConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    host: str
    port: str
    target_api_name: str

    def template_vars(self) -> dict[str, str]:
        """Values under their option names, for the script templates."""
        return {
            KONG_HOST: self.host,
            KONG_PORT: self.port,
            TARGET_API_NAME: self.target_api_name,
        }


def resolve_config(overrides: dict | None = None, defaults: dict[str, str] = DEFAULTS) -> GatewayConfig:
    """Layer `overrides` onto `defaults`. Missing or None values keep the default."""
    merged = dict(defaults)
    for key, value in (overrides or {}).items():
        if key in merged and value is not None:
            merged[key] = str(value)
    return GatewayConfig(
        host=merged[KONG_HOST],
        port=merged[KONG_PORT],
        target_api_name=merged[TARGET_API_NAME],
    )


def load_config_file(file_path: Path) -> dict:
    """Read generator options from a YAML or JSON file."""
    text = file_path.read_text(encoding="utf-8")
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise KongCodegenError(f"Cannot parse config file {file_path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise KongCodegenError(f"Config file {file_path} must contain a mapping")
    return data
