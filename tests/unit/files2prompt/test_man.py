import argparse

import pytest

from files2prompt.cli import build_parser
from files2prompt.man import render_manpage


@pytest.mark.unit
def test_render_manpage_sections() -> None:
    page = render_manpage(build_parser())

    for section in (".SH NAME", ".SH SYNOPSIS", ".SH DESCRIPTION", ".SH OPTIONS"):
        assert section in page
    assert r"\fB\-\-include\-hidden\fR" in page


@pytest.mark.unit
def test_render_manpage_escapes_dashes_and_backslashes() -> None:
    parser = argparse.ArgumentParser(prog="tool", description="a-b")
    parser.add_argument("--path-sep", help=r"use \ as separator")

    page = render_manpage(parser, section=5)

    assert page.startswith('.TH "TOOL" "5"')
    assert r"tool \- a\-b" in page
    assert r"use \e as separator" in page
    assert r"\fB\-\-path\-sep\fR \fIPATH_SEP\fR" in page
