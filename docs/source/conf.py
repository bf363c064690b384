import os
import sys

sys.path.insert(0, os.path.abspath("../.."))

from verso import __version__  # noqa

project = "verso"
copyright = "2026, verso developers"
author = "verso developers"
version = __version__
release = version

extensions = [
    # "sphinx.ext.autodoc",
    "sphinx.ext.autosectionlabel",
    # "sphinx.ext.autosummary",
    "sphinx.ext.napoleon",
    "sphinx.ext.viewcode",
    # "sphinx_autodoc_typehints",
    "sphinx.ext.autodoc.typehints",
    "sphinx.ext.todo",
    "autoapi.extension",
]

autodoc_typehints = "description"

autoapi_dirs = ["../../verso"]
autoapi_member_order = "groupwise"
autoapi_add_toctree_entry = False

autosectionlabel_prefix_document = True


exclude_patterns = []

html_theme = "pydata_sphinx_theme"

