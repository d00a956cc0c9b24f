# Configuration file for the Sphinx documentation builder.
#
# This file only contains a selection of the most common options. For a full
# list see the documentation:
# https://www.sphinx-doc.org/en/master/usage/configuration.html

# -- Path setup --------------------------------------------------------------

# If extensions (or modules to document with autodoc) are in another directory,
# add these directories to sys.path here. If the directory is relative to the
# documentation root, use os.path.abspath to make it absolute, like shown here.
#
import os
import sys
sys.path.insert(0, os.path.abspath('../src')) # Prioritize local module copy.


# -- Project information -----------------------------------------------------

# The name and version are retrieved from the assignments to ``name`` and
# ``version`` in ``setup.py`` in the root directory.
import re
with open('../setup.py', 'r') as setup_file:
    setup_string = setup_file.read()
project = re.search(r"^name = '([^']*)'", setup_string, re.MULTILINE).group(1)
version = re.search(r"^version = '([^']*)'", setup_string, re.MULTILINE).group(1)
release = version
author = project + ' contributors'
copyright = author # pylint: disable=redefined-builtin


# -- General configuration ---------------------------------------------------

# Add any Sphinx extension module names here, as strings. They can be
# extensions coming with Sphinx (named 'sphinx.ext.*') or your custom
# ones.
extensions = [
    'sphinx.ext.autodoc',
    'sphinx.ext.doctest',
    'sphinx.ext.napoleon',
    'sphinx.ext.intersphinx',
    'sphinx.ext.viewcode'
]

# Add any paths that contain templates here, relative to this directory.
templates_path = ['_templates']

# List of patterns, relative to source directory, that match files and
# directories to ignore when looking for source files.
# This pattern also affects html_static_path and html_extra_path.
exclude_patterns = ['_build']

# Options to configure autodoc extension behavior.
autodoc_member_order = 'bysource'
autodoc_default_options = {
    'special-members': True,
    'exclude-members': ','.join([
        '__new__',
        '__init__',
        '__weakref__',
        '__module__',
        '__hash__',
        '__dict__',
        '__annotations__',
        '__slots__',
        '__dataclass_fields__',
        '__dataclass_params__'
    ])
}
autodoc_preserve_defaults = True

# Conceal private helper functions (such as the elimination routine of the
# banded strategy) and the structural sub-protocol type.

def autodoc_skip_member_handler(app, what, name, obj, skip, options):
    if name.startswith('_') and not name.startswith('__'):
        return True
    if name == 'subprotocol' and what == 'module':
        return True
    return skip

def autodoc_process_bases_handler(app, name, obj, options, bases):
    # Conceal the base class (replacing it with the universal object base
    # class) of every class that is not derived from ``bytes``, ``list``,
    # or an exception class.
    if bases and bases[0] not in (bytes, list) and not issubclass(bases[0], Exception):
        bases.pop()
        bases.append(type('', (), {}).__bases__[0])

def setup(app):
    app.connect('autodoc-skip-member', autodoc_skip_member_handler)
    app.connect('autodoc-process-bases', autodoc_process_bases_handler)

# Allow references/links to definitions found in the Python documentation
# and in the documentation for this package's dependencies.

def rtd_url_for_installed_version(name):
    prefix = 'https://' + name + '.readthedocs.io/en/'

    if sys.version_info.major == 3 and sys.version_info.minor == 7:
        import pkg_resources
        return prefix + pkg_resources.get_distribution(name).version

    import importlib.metadata
    return prefix + importlib.metadata.version(name)

intersphinx_mapping = {
    'python': ('https://docs.python.org/3', None),
    'parts': (rtd_url_for_installed_version('parts'), None),
    'bitlist': (rtd_url_for_installed_version('bitlist'), None)
}


# -- Options for HTML output -------------------------------------------------

# The theme to use for HTML and HTML Help pages.  See the documentation for
# a list of builtin themes.
#
html_theme = 'sphinx_rtd_theme'

# Theme options for Read the Docs.
html_theme_options = {
    'display_version': True,
    'collapse_navigation': True,
    'navigation_depth': 1,
    'titles_only': True
}
