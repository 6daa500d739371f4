from __future__ import annotations

LANG_EXTENSIONS = {
    "c": {".c"},
    "cpp": {".cpp", ".cc", ".cxx"},
}


def allowed_extensions(languages: list[str], extensions: list[str] | None = None) -> set[str]:
    if extensions:
        return set(extensions)
    exts: set[str] = set()
    for lang in languages:
        exts |= LANG_EXTENSIONS.get(lang, set())
    return exts
