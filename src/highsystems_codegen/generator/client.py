"""Client generator — compiles every operation and fills the template."""

import logging
import os
import tempfile
from pathlib import Path

from highsystems_codegen.generator.operation import Fragment, compile_operation
from highsystems_codegen.generator.overrides import OverrideResolver
from highsystems_codegen.generator.template import (
    METHODS_SLOT,
    REQUEST_TYPES_SLOT,
    RESPONSE_TYPES_SLOT,
    Template,
    load_template,
)
from highsystems_codegen.generator.walker import INDENT
from highsystems_codegen.parser.base import ApiDocument

logger = logging.getLogger(__name__)


class ClientGenerator:
    """Generates the TypeScript client source for an API document."""

    def __init__(self, template: Template | None = None, resolver: OverrideResolver | None = None):
        self.template = template or load_template()
        self.resolver = resolver or OverrideResolver()

    def compile(self, document: ApiDocument) -> list[Fragment]:
        """Compile every operation, in document order."""
        self.resolver.reset()
        fragments = []
        for operation in document.operations:
            logger.debug("Compiling %s %s (%s)", operation.method.upper(), operation.path, operation.operation_id)
            fragments.append(compile_operation(operation, self.resolver))
        return fragments

    def generate(self, document: ApiDocument) -> str:
        """Return the full client source."""
        fragments = self.compile(document)

        methods = "\n\n".join(
            "\n".join(INDENT + line for line in fragment.function_definition.split("\n"))
            for fragment in fragments
        )
        request_types = "\n\n".join(
            f"export {fragment.request_type}" for fragment in fragments if fragment.request_type
        )
        response_types = "\n\n".join(
            f"export {fragment.response_type}" for fragment in fragments if fragment.response_type
        )

        return self.template.render({
            METHODS_SLOT: methods,
            REQUEST_TYPES_SLOT: request_types,
            RESPONSE_TYPES_SLOT: response_types,
        })

    def write(self, document: ApiDocument, output: Path) -> str:
        """Generate and write the client, replacing `output` in one step."""
        source = self.generate(document)

        output.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=output.parent, prefix=f".{output.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(source)
            umask = os.umask(0)
            os.umask(umask)
            os.chmod(tmp_name, 0o644 & ~umask)
            os.replace(tmp_name, output)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        return source
