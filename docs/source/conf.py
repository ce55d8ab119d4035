import os
import sys
sys.path.insert(0, os.path.abspath('../../src'))

extensions = [
    'sphinx.ext.autodoc',
    'sphinx.ext.viewcode',
    'sphinx.ext.napoleon',
    'numpydoc',
    'sphinx_autodoc_typehints',
]

html_theme = 'sphinx_rtd_theme'
numpydoc_show_class_members = False

# -- Project information -----------------------------------------------------

project = 'docexport'
copyright = '2026, docexport contributors'
author = 'docexport contributors'
release = '0.1.0'

# -- General configuration ---------------------------------------------------

templates_path = ['_templates']
exclude_patterns = []
autodoc_mock_imports = []

# -- Options for HTML output -------------------------------------------------

html_static_path = ['_static']
