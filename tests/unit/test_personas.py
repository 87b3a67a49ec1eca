"""Tests for persona presets."""

from lumo.personas import DEFAULT_PERSONA_ID, get_persona, list_personas


def test_general_is_listed_first():
    ids = [persona.id for persona in list_personas()]

    assert ids[0] == DEFAULT_PERSONA_ID
    assert set(ids) == {
        "general",
        "code-master",
        "creative-writer",
        "data-scientist",
        "language-tutor",
    }


def test_persona_fields_come_from_front_matter():
    persona = get_persona("data-scientist")

    assert persona.name == "Data Scientist"
    assert persona.icon
    assert persona.description
    assert not persona.system_prompt.startswith("---")


def test_unknown_persona_falls_back_to_general():
    assert get_persona("pirate").id == "general"
    assert get_persona(None).id == "general"
