# ruff: noqa: D100,D103
# Configuration file for the Sphinx documentation builder.
#
# For the full list of built-in configuration values, see the documentation:
# https://www.sphinx-doc.org/en/master/usage/configuration.html

import sys
import os
import importlib_metadata
from packaging.version import Version

project = 'twolevel'
copyright = '2023, Ohio Northern University'

try:
    tl_ver = Version(importlib_metadata.version("twolevel"))
    am_ver = Version(importlib_metadata.version("amaranth"))
except importlib_metadata.PackageNotFoundError as e:
    msg = "run \"pdm install --dev -G dev -G doc\" before building docs"
    raise RuntimeError(msg) from e

if am_ver.is_devrelease:
    am_ver = "latest"
else:
    am_ver = f"v{am_ver.public}"

version = str(tl_ver).replace(".editable", "")
release = tl_ver.public
author = 'Maxwell Phillips'

sys.path.append(os.path.abspath('../src'))

# -- General configuration ---------------------------------------------------

extensions = ["myst_parser",
              "sphinx-prompt",
              "sphinx.ext.autodoc",
              "sphinx.ext.intersphinx",
              "sphinx_rtd_theme",
              "sphinx.ext.doctest",
              "sphinx.ext.napoleon",
              "sphinx.ext.mathjax"]

templates_path = ['_templates']
exclude_patterns = ['_build', 'Thumbs.db', '.DS_Store']

intersphinx_mapping = {'python': ('https://docs.python.org/3', None),
                       'amaranth': (f"https://amaranth-lang.org/docs/amaranth/{am_ver}/", None)}  # noqa: E501
autodoc_default_options = {"members": True,
                           "undoc-members": True}

myst_footnote_transition = False
myst_heading_anchors = 3

# -- Options for HTML output -------------------------------------------------

html_theme = "sphinx_rtd_theme"
html_static_path = []
