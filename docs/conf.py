"""Sphinx configuration for codecstream documentation."""

import codecstream

project = "codecstream"
copyright = "2026, codecstream contributors"
author = "codecstream contributors"
release = codecstream.__version__
version = ".".join(release.split(".")[:2])

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.intersphinx",
    "sphinx_copybutton",
]

exclude_patterns = ["_build"]

html_theme = "furo"

intersphinx_mapping = {
    "python": ("https://docs.python.org/3", None),
    "chardet": ("https://chardet.readthedocs.io/en/latest", None),
}

autodoc_member_order = "bysource"
autodoc_typehints = "description"
