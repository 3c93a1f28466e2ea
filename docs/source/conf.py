# Configuration file for the Sphinx documentation builder.
#
# For the full list of built-in configuration values, see the documentation:
# https://www.sphinx-doc.org/en/master/usage/configuration.html

# -- Path setup ----------------------------------------------------------------
from __future__ import annotations

import os
import sys
from datetime import datetime

# -- Import the package to document ----------------------------------------------
sys.path.insert(0, os.path.abspath("../../src"))

# -- Project information -----------------------------------------------------

project = "viewstats"
author = "viewstats contributors"
copyright = f"{datetime.now():%Y}, {author}"

# -- General configuration ---------------------------------------------------

extensions = [
    # Core
    "sphinx.ext.autodoc",
    "sphinx.ext.autosummary",
    "sphinx.ext.intersphinx",
    "sphinx.ext.mathjax",
    "sphinx.ext.viewcode",
    "sphinx.ext.doctest",
    # Docs quality
    "numpydoc",
    "myst_parser",
    # UX polish
    "sphinx_copybutton",
    "sphinx_design",
]

nitpicky = True
nitpick_ignore = [
    ("py:mod", "viewstats"),
    ("py:mod", "viewstats.view"),
    ("py:mod", "viewstats.aggregates"),
    ("py:mod", "viewstats.stats_engine"),
    # Metric is a Protocol, not a regular class
    ("py:class", "viewstats.stats_engine.Metric"),
    ("py:obj", "viewstats.stats_engine.Metric"),
    ("py:class", "T"),
]

# StatsContext is a slotted dataclass; its fields do not resolve as attributes
nitpick_ignore_regex = [
    (r"py:attr", r"viewstats\.stats_engine\.StatsContext\..*"),
    (r"py:attr", r"^StatsContext\.\w+$"),
]

templates_path = ["_templates"]
exclude_patterns = ["_build", "Thumbs.db", ".DS_Store"]

# -- Options for HTML output -------------------------------------------------

html_theme = "pydata_sphinx_theme"
html_theme_options = {
    "show_prev_next": False,
    "navigation_depth": 2,
}

# -- Autodoc / Autosummary ------------------------------------------------------
autosummary_generate = True
autosummary_imported_members = True      # include re-exported symbols
autodoc_member_order = "bysource"        # keep source order for readability
autodoc_typehints = "signature"          # types only in signature, not body
autoclass_content = "class"
autodoc_default_options = {
    "members": True,
    "inherited-members": False,
    "show-inheritance": True,
    "undoc-members": False,
}

# -- Numpydoc ----------------------------------------------------------------
numpydoc_show_class_members = False
numpydoc_class_members_toctree = False
numpydoc_xref_param_type = True

numpydoc_xref_ignore = {
    "of", "or", "default", "optional", "keyword-only",
    "mapping", "iterable", "sequence", "callable",
    "any", "scalar", "array-like",
}

numpydoc_xref_aliases = {
    "ProjectedView": "viewstats.view.ProjectedView",
    "SkippingCursor": "viewstats.view.SkippingCursor",
    "DataModifier": "viewstats.view.DataModifier",
    "Dataset": "viewstats.data.Dataset",
    "PrefixWindow": "viewstats.data.PrefixWindow",
    "PositionWindow": "viewstats.data.PositionWindow",
    "JointData": "viewstats.joint.JointData",
    "StatsEngine": "viewstats.stats_engine.StatsEngine",
    "StatsContext": "viewstats.stats_engine.StatsContext",
    "FnMetric": "viewstats.stats_engine.FnMetric",
    "MutableSequence": "collections.abc.MutableSequence",
    # NumPy types
    "ndarray": "numpy.ndarray",
    "Generator": "numpy.random.Generator",
    # Python builtins (via intersphinx)
    "int": ":py:class:`int`",
    "float": ":py:class:`float`",
    "bool": ":py:class:`bool`",
    "str": ":py:class:`str`",
}

intersphinx_mapping = {
    "python": ("https://docs.python.org/3", None),
    "numpy": ("https://numpy.org/doc/stable/", None),
    "scipy": ("https://docs.scipy.org/doc/scipy/", None),
}

# -- MyST (Markdown) ------------------------------------------------------------
myst_enable_extensions = ["dollarmath", "amsmath"]
myst_heading_anchors = 3

# -- Copybutton (skip prompts in code blocks) -----------------------------------
copybutton_prompt_text = r">>> |\.\.\. |\$ "
copybutton_prompt_is_regexp = True
