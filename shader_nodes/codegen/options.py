from dataclasses import dataclass

@dataclass(frozen=True)
class GeneratorOptions:
    """
    Formatting options for generated source.
    
    Example:
        options = GeneratorOptions(float_precision=3)
        shader = VisualShader(options=options)
    """
    float_precision: int = 5
    # Emit a "// <caption>:<id>" marker before each node section
    node_comments: bool = True

DEFAULT_OPTIONS = GeneratorOptions()
