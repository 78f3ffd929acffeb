"""Pytest configuration for the mendeleyfix project.

This file ensures that the project root is on ``sys.path`` so that tests can
import the package without installing it, and provides a small Mendeley
export shared by several test modules.
"""

from __future__ import annotations

import sys
import pathlib

# add workspace root to path for test imports
sys.path.insert(0, str(pathlib.Path(__file__).parent.parent))

import pytest


MENDELEY_EXPORT = r"""Automatically generated by Mendeley Desktop 1.19.5
Any changes to this file will be lost if it is regenerated by Mendeley.

BibTeX export options can be customized via Options -> BibTeX in Mendeley Desktop

@article{Noel2016,
abstract = {We study {diffusion} in
a channel.

Second paragraph},
author = {Noel, Adam},
doi = {10.1109/TNB.2016.1234},
file = {:C$\backslash$:/Users/adam/Noel2016.pdf:pdf},
issn = {1536-1241},
journal = {IEEE Trans. Nanobiosci.},
month = {jun},
title = {{Diffusive {\{}molecular{\}} communication}},
url = {http://ieeexplore.ieee.org/document/1},
year = {2016}
}

@misc{Web2019,
author = {Someone},
title = {{A web page}},
url = {https://example.org/page}
}
"""

FIXED_EXPORT = r"""@article{Noel2016,
author = {Noel, Adam},
doi = {10.1109/TNB.2016.1234},
issn = {1536-1241},
journal = {IEEE Trans. Nanobiosci.},
month = jun,
title = {Diffusive {molecular} communication},
year = {2016}
}
@misc{Web2019,
author = {Someone},
title = {A web page},
url = {https://example.org/page}
}
"""


@pytest.fixture
def mendeley_export():
    return MENDELEY_EXPORT


@pytest.fixture
def fixed_export():
    return FIXED_EXPORT


@pytest.fixture
def export_file(tmp_path):
    """Write the sample export to ``library.bib`` inside *tmp_path*."""
    path = tmp_path / "library.bib"
    path.write_text(MENDELEY_EXPORT, encoding="utf-8")
    return path
