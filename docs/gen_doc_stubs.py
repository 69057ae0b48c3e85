"""Writes one API reference page per public ``tlfdtd`` module at build time.

Run by the mkdocs ``gen-files`` plugin. Private modules (leading underscore)
are skipped; subpackages get an ``index.md`` built from their ``__init__``.
An overview page links every generated page.
"""
from pathlib import Path

import mkdocs_gen_files

PACKAGE = "tlfdtd"
REFERENCE_DIR = Path("references")

package_root = (Path(__file__).parent.parent / PACKAGE).resolve()
pages: list[tuple[str, Path]] = []

for source in sorted(package_root.rglob("*.py")):
    module_parts = source.relative_to(package_root).with_suffix("").parts
    if module_parts[-1] == "__init__":
        module_parts = module_parts[:-1]
        page = Path(*module_parts, "index.md")
    elif module_parts[-1].startswith("_"):
        continue
    else:
        page = Path(*module_parts).with_suffix(".md")

    dotted = ".".join((PACKAGE, *module_parts))
    page = REFERENCE_DIR / page
    with mkdocs_gen_files.open(page, "w") as fd:
        fd.write(f"# `{dotted}`\n\n::: {dotted}\n")
    mkdocs_gen_files.set_edit_path(page, source)
    pages.append((dotted, page))

with mkdocs_gen_files.open(REFERENCE_DIR / "overview.md", "w") as fd:
    fd.write("# API reference\n\n")
    for dotted, page in pages:
        fd.write(f"- [`{dotted}`]({page.relative_to(REFERENCE_DIR).as_posix()})\n")
