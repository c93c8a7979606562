import pytest
from presse.encoding import LATIN1_RULES, REPAIR_RULES, repair_encoding


# ── Latin-1 mojibake ──────────────────────────────────────────

class TestLatin1Mojibake:
    def test_accented_letters(self):
        assert repair_encoding("Ã©tÃ© Ã  la mer") == "été à la mer"

    def test_cedilla_and_circumflex(self):
        assert repair_encoding("garÃ§on, hÃ´tel, fenÃªtre") == "garçon, hôtel, fenêtre"

    def test_c_before_cedilla_absorbed(self):
        assert repair_encoding("francÃ§aise") == "française"
        assert repair_encoding("garÃ§on") == "garçon"

    def test_nbsp_variant_of_a_grave(self):
        assert repair_encoding("voilÃ\u00a0 tout") == "voilà tout"

    def test_right_single_quote(self):
        assert repair_encoding("lâ€™Ã©tat") == "l’état"

    def test_curly_double_quotes(self):
        assert repair_encoding("â€œCitationâ€") == "“Citation”"

    def test_en_dash(self):
        assert repair_encoding("Paris â€“ Lyon") == "Paris – Lyon"

    def test_oe_ligature(self):
        assert repair_encoding("cÅ“ur") == "cœur"

    def test_nbsp_artifact(self):
        assert repair_encoding("prixÂ\u00a0: 10") == "prix : 10"


# ── Mac Roman mojibake ────────────────────────────────────────

class TestMacRomanMojibake:
    def test_double_encoded(self):
        assert repair_encoding("L'√É¬©conomie franc√É¬ßaise") == "L'économie française"

    def test_single_step_after_c(self):
        assert repair_encoding("franc√ßaise") == "française"

    def test_single_step(self):
        assert repair_encoding("√©t√©") == "été"

    def test_double_encoded_apostrophe(self):
        assert repair_encoding("l√¢‚Ç¨‚Ñ¢homme") == "l’homme"

    def test_guillemets(self):
        assert repair_encoding("¬´ Oui ¬ª") == "« Oui »"


# ── pass-through ──────────────────────────────────────────────

class TestPassThrough:
    def test_clean_text_unchanged(self):
        text = "L'économie française se porte bien à Paris."
        assert repair_encoding(text) == text

    def test_empty_string(self):
        assert repair_encoding("") == ""

    def test_none_input(self):
        assert repair_encoding(None) == ""

    def test_unknown_sequence_left_as_is(self):
        assert repair_encoding("Ã˜ inconnu") == "Ã˜ inconnu"


# ── rule ordering ─────────────────────────────────────────────

class TestRuleOrdering:
    def test_prefix_rules_come_after_longer_ones(self):
        patterns = [p for p, _ in REPAIR_RULES]
        for i, shorter in enumerate(patterns):
            for longer in patterns[i + 1:]:
                if longer != shorter and longer.startswith(shorter):
                    pytest.fail(f"{shorter!r} shadows {longer!r}")

    def test_bare_quote_prefix_is_last_of_family(self):
        family = [p for p, _ in LATIN1_RULES if p.startswith("â€")]
        assert family[-1] == "â€"
