from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

__all__ = [
    'GeneratorKind', 'GeneratorSpec',
    'GENERATORS', 'generator_for', 'spec_for',
]


class GeneratorKind(Enum):
    NONE = 'none'
    LEGACY = 'legacy'
    MODERN = 'modern'


@dataclass(frozen=True)
class GeneratorSpec:
    """
    How to find, run and install one family of code generators.

    :param kind: The generator kind
    :param suffix: Suffix of generator-source files
    :param executable: Name of the generator executable
    :param args: Arguments passed to the executable
    :param module: Go module reference to self-install the executable from
    :param output_suffix: Suffix of the companion generated file
    :param replace_suffix: Whether ``output_suffix`` replaces ``suffix`` instead of being appended
    """
    kind: GeneratorKind
    suffix: str
    executable: str
    args: tuple[str, ...] = field(default=())
    module: str = ''
    output_suffix: str = '.go'
    replace_suffix: bool = False

    def companion(self, source: Path) -> Path:
        """
        The generated file belonging to a generator-source file.

        :param source: Path of the generator-source file
        :return: Path of the generated Go file
        """
        if self.replace_suffix:
            return source.with_name(source.name[:-len(self.suffix)] + self.output_suffix)
        return source.with_name(source.name + self.output_suffix)


GENERATORS: tuple[GeneratorSpec, ...] = (
    # quicktemplate: foo.qtpl -> foo.qtpl.go
    GeneratorSpec(
        kind=GeneratorKind.LEGACY,
        suffix='.qtpl',
        executable='qtc',
        module='github.com/valyala/quicktemplate/qtc',
    ),
    # templ: foo.templ -> foo_templ.go
    GeneratorSpec(
        kind=GeneratorKind.MODERN,
        suffix='.templ',
        executable='templ',
        args=('generate',),
        module='github.com/a-h/templ/cmd/templ',
        output_suffix='_templ.go',
        replace_suffix=True,
    ),
)


def generator_for(name: str) -> GeneratorSpec | None:
    """Find the generator handling a file name, by suffix."""
    for spec in GENERATORS:
        if name.endswith(spec.suffix):
            return spec
    return None


def spec_for(kind: GeneratorKind) -> GeneratorSpec:
    for spec in GENERATORS:
        if spec.kind is kind:
            return spec
    raise ValueError(f"No generator for kind: {kind.value}")
