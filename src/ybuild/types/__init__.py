from .generator import GeneratorKind, GeneratorSpec, GENERATORS

__all__ = ['GeneratorKind', 'GeneratorSpec', 'GENERATORS']
