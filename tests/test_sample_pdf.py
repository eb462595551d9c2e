import os
import pytest
from rehearsal_project.io.pdf_text import extract_pdf_text
from rehearsal_project.pipeline.parse_script import parse_scene_text

MUCH_ADO = "data/raw/much-ado-about-nothing.pdf"

@pytest.mark.skipif(not os.path.exists(MUCH_ADO), reason="Much Ado PDF not found in data/raw/")
def test_much_ado_parses():
    result = parse_scene_text(extract_pdf_text(MUCH_ADO), "Much Ado About Nothing")
    # Loose sanity bounds; exact counts depend on the edition.
    assert len(result.line_blocks) > 500
    assert {"Leonato", "Beatrice", "Benedick"} <= set(result.characters)
    assert result.sections[0].order_index == 0
    assert len(result.sections) >= 5
    assert result.line_blocks[0].preceding_cue_raw is None
