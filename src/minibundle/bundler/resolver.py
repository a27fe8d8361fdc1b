"""Module resolution: one file path in, one Module record out."""

from __future__ import annotations

from minibundle.bundler.models import BuildContext, Module
from minibundle.bundler.writer import read_source
from minibundle.codegen import transform, validate_target
from minibundle.logging import get_logger
from minibundle.parser import collect_specifiers, parse


class ModuleResolver:
    """Reads, parses and transforms a single module.

    Dependency specifiers come from static import and re-export declarations
    only; ``require()`` calls and dynamic ``import()`` are not followed.
    """

    def __init__(self, context: BuildContext, target: str = "es5") -> None:
        self.context = context
        self.target = validate_target(target)

    def resolve(self, path: str) -> Module:
        """Resolve ``path`` into a Module with a freshly allocated id.

        Raises:
            SourceNotFoundError: If the file does not exist
            SourceReadError: If the file cannot be read
            ParseError: If the file is not a valid module
        """
        source = read_source(path)
        tree = parse(source, source_type="module", file_path=path)
        specifiers = collect_specifiers(tree)
        code = transform(tree, self.target)

        module = Module(
            id=self.context.next_id(),
            path=path,
            dependency_specifiers=specifiers,
            code=code,
        )
        get_logger().debug(f"Resolved module {module.id}: {path} ({len(specifiers)} imports)")
        return module
