"""Path parameter converters.

Regex patterns for route path segments like ``{id:int}``. Values are
captured as strings; handlers convert them through their annotations.
"""

CONVERTERS: dict[str, str] = {
    "str": r"[^/]+",
    "int": r"\d+",
    "float": r"\d+(?:\.\d+)?",
    "path": r".+",
}
