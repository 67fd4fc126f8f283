"""Script generator — renders Kong route registration scripts from route descriptors."""

import os
import re
import stat
import uuid
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from kong_codegen.config import GatewayConfig
from kong_codegen.generator.escaper import IdentifierEscaper
from kong_codegen.log import get_logger
from kong_codegen.parser.base import RouteDescriptor, SchemaDocument

logger = get_logger(__name__)

TEMPLATES_DIR = Path(__file__).parent.parent / "templates"
API_TEMPLATE = "kong-bash-script.sh.jinja"
SCRIPT_EXTENSION = ".sh"

_NON_WORD_RUN = re.compile(r"\W+")


def api_file_folder(output_root: Path, source_folder: str = "", api_package: str = "") -> Path:
    """Folder for the API scripts: output root / source folder / package as a path."""
    folder = Path(output_root)
    if source_folder:
        folder = folder / source_folder
    if api_package:
        folder = folder / api_package.replace(".", os.sep)
    return folder


def tag_key(tag: str) -> str:
    """Reduce a tag to word characters: 'Pets/v2' -> 'pets_v2', '../x' -> 'x'."""
    return _NON_WORD_RUN.sub("_", tag.lower()).strip("_") or "default"


def to_api_name(tag: str) -> str:
    """'pet_store' -> 'PetStoreApi'"""
    return tag_key(tag).title().replace("_", "") + "Api"


class ScriptGenerator:
    """Renders one bash script per API tag."""

    def __init__(
        self,
        config: GatewayConfig,
        escaper: IdentifierEscaper | None = None,
        templates_dir: Path = TEMPLATES_DIR,
    ):
        self.config = config
        self.escaper = escaper or IdentifierEscaper()
        self.env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )
        self.env.filters["escape_quote"] = self.escaper.escape_quotation_mark
        self.env.filters["escape_text"] = self.escaper.escape_text
        self.env.globals["plugin_id"] = self.plugin_id

    def plugin_id(self, nickname: str) -> str:
        """Stable id of a route's request-transformer plugin, so re-runs update it in place."""
        name = f"kong-codegen:{self.config.target_api_name}:{nickname}:request-transformer"
        return str(uuid.uuid5(uuid.NAMESPACE_URL, name))

    def _group_by_tag(self, routes: list[RouteDescriptor]) -> dict[str, list[RouteDescriptor]]:
        """Group routes by their first tag. Untagged routes go to 'default'."""
        groups: dict[str, list[RouteDescriptor]] = {}
        for route in routes:
            tag = route.tags[0] if route.tags else "default"
            groups.setdefault(tag_key(tag), []).append(route)
        return groups

    def generate(self, document: SchemaDocument, routes: list[RouteDescriptor]) -> dict[str, str]:
        """Render the scripts.

        Returns a dict of {filename: script_content}.
        """
        template = self.env.get_template(API_TEMPLATE)
        files = {}
        for tag, tag_routes in sorted(self._group_by_tag(routes).items()):
            api_name = to_api_name(tag)
            context = {
                **self.config.template_vars(),
                "apiVersion": document.version,
                "appName": self.escaper.escape_text(document.title),
                "basePath": document.base_path,
                "upstreamUrl": document.upstream_url,
                "classname": api_name,
                "routes": tag_routes,
            }
            files[api_name + SCRIPT_EXTENSION] = template.render(context)
            logger.debug("Rendered %s with %d routes", api_name, len(tag_routes))
        return files


def write_files(files: dict[str, str], folder: Path) -> list[Path]:
    """Write the rendered scripts into `folder` and make them executable."""
    folder.mkdir(parents=True, exist_ok=True)
    written = []
    for filename, content in files.items():
        file_path = folder / filename
        file_path.write_text(content, encoding="utf-8")
        file_path.chmod(file_path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        written.append(file_path)
    return written
