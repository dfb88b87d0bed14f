from quill_guard.core import (
    AI_HIGH,
    AI_LOW,
    AI_MODERATE,
    FILLER_HIGH,
    FILLER_LOW,
    FILLER_MODERATE,
    UNIQUE_OPENING,
    VARY_STRUCTURE,
    Thresholds,
    analyze_content,
    detect_ai_patterns,
    detect_filler_words,
    detect_plagiarism_indicators,
)
from quill_guard.rules import RuleSet


def _words(n: int) -> str:
    return " ".join(["word"] * n)


def _sentences(*parts: str) -> str:
    return " ".join(p + "." for p in parts)


HUMAN_TEXT = (
    "The bridge collapsed at 3:47 a.m. on a Tuesday. "
    "River water pushed through the gap in under a minute. "
    "Two cars stopped short of the edge. "
    "The county engineer had flagged corrosion in a report eighteen months earlier."
)

FORMULAIC_TEXT = (
    "In today's world, technology plays a crucial role in education. "
    "It is important to note that students use it in order to learn. "
    "First and foremost, there are many reasons to embrace it. "
    "Needless to say, it has become increasingly common. "
    "In conclusion, it is one of the most important tools."
)


class TestAnalyzeContent:
    def test_result_shape(self):
        result = analyze_content(HUMAN_TEXT)
        assert set(result) == {"ai_detection", "filler_analysis", "plagiarism_indicators"}
        assert set(result["ai_detection"]) == {"likelihood", "patterns_found", "match_count", "assessment"}
        assert set(result["filler_analysis"]) == {"filler_percentage", "fillers_found", "match_count", "assessment"}
        assert set(result["plagiarism_indicators"]) == {
            "repetition_percentage", "duplicate_sentence_count", "has_generic_opening", "plagiarism_risk", "suggestions",
        }

    def test_empty_text_is_all_zero(self):
        result = analyze_content("")
        assert result["ai_detection"]["likelihood"] == "0.0"
        assert result["ai_detection"]["patterns_found"] == []
        assert result["ai_detection"]["match_count"] == 0
        assert result["filler_analysis"]["filler_percentage"] == "0.00"
        assert result["filler_analysis"]["fillers_found"] == []
        assert result["plagiarism_indicators"]["repetition_percentage"] == "0.00"
        assert result["plagiarism_indicators"]["duplicate_sentence_count"] == 0
        assert result["plagiarism_indicators"]["has_generic_opening"] is False
        assert result["plagiarism_indicators"]["suggestions"] == []

    def test_whitespace_only_text_is_all_zero(self):
        result = analyze_content("   \n\t  ")
        assert result["ai_detection"]["likelihood"] == "0.0"
        assert result["filler_analysis"]["filler_percentage"] == "0.00"
        assert result["plagiarism_indicators"]["plagiarism_risk"] == "Low"

    def test_deterministic(self):
        assert analyze_content(FORMULAIC_TEXT) == analyze_content(FORMULAIC_TEXT)

    def test_human_text_scores_low(self):
        result = analyze_content(HUMAN_TEXT)
        assert result["ai_detection"]["assessment"] == AI_LOW
        assert result["ai_detection"]["match_count"] == 0
        assert result["plagiarism_indicators"]["plagiarism_risk"] == "Low"

    def test_formulaic_text_scores_high(self):
        result = analyze_content(FORMULAIC_TEXT)
        assert result["ai_detection"]["assessment"] == AI_HIGH
        assert result["ai_detection"]["match_count"] >= 8


class TestAIPatterns:
    def test_single_match_per_hundred_words(self):
        result = detect_ai_patterns("In conclusion, " + _words(98))
        assert result["likelihood"] == "10.0"
        assert result["patterns_found"] == ["In conclusion, "]
        assert result["match_count"] == 1
        assert result["assessment"] == AI_LOW

    def test_single_match_with_hundred_other_words(self):
        # 1 / (102 / 100) * 10 = 9.80...
        result = detect_ai_patterns("In conclusion, " + _words(100))
        assert result["likelihood"] == "9.8"

    def test_moderate_band(self):
        result = detect_ai_patterns("in order to " * 3 + _words(91))
        assert result["likelihood"] == "30.0"
        assert result["match_count"] == 3
        assert result["patterns_found"] == ["in order to"]
        assert result["assessment"] == AI_MODERATE

    def test_likelihood_is_capped(self):
        result = detect_ai_patterns("in order to in order to")
        assert result["likelihood"] == "100.0"
        assert result["assessment"] == AI_HIGH

    def test_patterns_found_keeps_literal_case(self):
        result = detect_ai_patterns("Needless to say, needless to say, NEEDLESS TO SAY " + _words(50))
        assert result["patterns_found"] == ["Needless to say", "needless to say", "NEEDLESS TO SAY"]
        assert result["match_count"] == 3

    def test_custom_thresholds(self):
        text = "In conclusion, " + _words(98)
        result = detect_ai_patterns(text, thresholds=Thresholds(ai_moderate=5.0))
        assert result["assessment"] == AI_MODERATE


class TestFillerWords:
    def test_high_filler_usage(self):
        result = detect_filler_words("This is very good and basically fine")
        assert result["filler_percentage"] == "28.57"
        assert result["fillers_found"] == ["very good", "basically"]
        assert result["match_count"] == 2
        assert result["assessment"] == FILLER_HIGH

    def test_moderate_filler_usage(self):
        result = detect_filler_words("basically " * 3 + _words(97))
        assert result["filler_percentage"] == "3.00"
        assert result["fillers_found"] == ["basically"]
        assert result["assessment"] == FILLER_MODERATE

    def test_low_filler_usage(self):
        result = detect_filler_words("honestly clearly " + _words(98))
        assert result["filler_percentage"] == "1.00"
        assert result["assessment"] == FILLER_LOW


class TestPlagiarismIndicators:
    def test_one_duplicate_in_four_sentences_is_high(self):
        text = _sentences(
            "The river flooded the valley",
            "THE RIVER FLOODED THE VALLEY",
            "Farmers moved their cattle uphill",
            "Nobody expected the second wave",
        )
        result = detect_plagiarism_indicators(text)
        assert result["duplicate_sentence_count"] == 1
        assert result["repetition_percentage"] == "25.00"
        assert result["plagiarism_risk"] == "High"
        assert result["suggestions"] == [VARY_STRUCTURE]

    def test_one_duplicate_in_six_sentences_is_medium(self):
        text = _sentences(
            "The river flooded the valley",
            "The river flooded the valley",
            "Farmers moved their cattle uphill",
            "Nobody expected the second wave",
            "Roads stayed closed for a week",
            "The school reopened in a church hall",
        )
        result = detect_plagiarism_indicators(text)
        assert result["repetition_percentage"] == "16.67"
        assert result["plagiarism_risk"] == "Medium"
        assert result["suggestions"] == [VARY_STRUCTURE]

    def test_ten_percent_repetition_stays_low(self):
        unique = [f"Sentence number {i} is distinct" for i in range(9)]
        text = _sentences(*unique, unique[0])
        result = detect_plagiarism_indicators(text)
        assert result["repetition_percentage"] == "10.00"
        assert result["plagiarism_risk"] == "Low"
        assert result["suggestions"] == []

    def test_short_fragments_are_ignored(self):
        result = detect_plagiarism_indicators("Yes. Yes. Yes. Yes!")
        assert result["repetition_percentage"] == "0.00"
        assert result["duplicate_sentence_count"] == 0

    def test_generic_opening_detected(self):
        result = detect_plagiarism_indicators("  According to the survey, most commuters cycle in summer.")
        assert result["has_generic_opening"] is True
        assert result["suggestions"] == [UNIQUE_OPENING]

    def test_generic_phrase_mid_text_is_not_an_opening(self):
        result = detect_plagiarism_indicators("The survey, according to its authors, covered four towns.")
        assert result["has_generic_opening"] is False

    def test_suggestion_order(self):
        text = _sentences(
            "This essay will discuss flooding",
            "Rivers rise in the spring",
            "Rivers rise in the spring",
        )
        result = detect_plagiarism_indicators(text)
        assert result["has_generic_opening"] is True
        assert result["suggestions"] == [VARY_STRUCTURE, UNIQUE_OPENING]


class TestCustomRules:
    def test_replacement_rule_set(self):
        rules = RuleSet.from_mapping("2", {"delve": {"pattern": r"\bdelve\b", "category": "ai_phrasing"}})
        result = analyze_content("Let us delve into the data " + _words(94), rules=rules)
        assert result["ai_detection"]["patterns_found"] == ["delve"]
        assert result["ai_detection"]["likelihood"] == "10.0"
        assert result["filler_analysis"]["match_count"] == 0
        assert result["plagiarism_indicators"]["has_generic_opening"] is False
