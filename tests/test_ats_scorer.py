"""
Tests for the ATS scoring heuristic and the optimisation checklist.
"""

import copy

import pytest

from resumeai.errors import ValidationError
from resumeai.services.analysis.ats_scorer import ACTION_VERBS, compute_score, get_optimizations


class TestComputeScore:
    """Score totals, issues and recommendations."""

    def test_complete_resume_example(self, complete_resume):
        """Format 20 + content 40 + skills 10 + keywords 2/6 of 20."""
        result = compute_score(complete_resume)

        assert result.ats_score == 77
        assert result.issues == ["Use strong action verbs (2/6 found)"]
        assert result.details.format_score == 20
        assert result.details.content_score == 40
        assert result.details.skills_score == 12
        assert result.details.keyword_score == pytest.approx(20 / 3)

    def test_complete_resume_recommendations(self, complete_resume):
        result = compute_score(complete_resume)

        assert result.recommendations == [
            "Add portfolio/LinkedIn link",
            "✓ Descriptions complete",
            "Add more relevant skills",
            "✓ Adequate content length",
        ]

    def test_empty_resume_reports_every_gap(self, empty_resume):
        result = compute_score(empty_resume)

        assert result.ats_score == 0
        assert result.issues == [
            "Resume too short (< 100 words)",
            "Add a professional summary",
            "Add work experience",
            "Add education details",
            "Add more skills (minimum 5 recommended)",
            "Use strong action verbs (0/6 found)",
        ]
        assert result.details.content_score == 0
        assert result.details.skills_score == 0
        assert result.details.keyword_score == 0

    def test_empty_sections_score_below_half(self, complete_resume):
        """Personal details alone cannot lift an empty resume past 50."""
        complete_resume["experience"] = []
        complete_resume["education"] = []
        complete_resume["skills"] = []

        result = compute_score(complete_resume)

        assert result.ats_score < 50
        assert "Add work experience" in result.issues
        assert "Add education details" in result.issues
        assert "Add more skills (minimum 5 recommended)" in result.issues

    def test_recommendations_always_four(self, empty_resume):
        result = compute_score(empty_resume)
        assert len(result.recommendations) == 4
        assert all(not line.startswith("✓") for line in result.recommendations)

    def test_all_positive_recommendations(self, complete_resume):
        complete_resume["personal"]["portfolio"] = "https://linkedin.com/in/ada"
        complete_resume["skills"] = [f"skill-{i}" for i in range(10)]

        result = compute_score(complete_resume)

        assert all(line.startswith("✓") for line in result.recommendations)

    def test_is_deterministic(self, complete_resume):
        first = compute_score(complete_resume)
        second = compute_score(copy.deepcopy(complete_resume))
        assert first == second
        assert first.model_dump() == second.model_dump()

    def test_does_not_mutate_input(self, complete_resume):
        before = copy.deepcopy(complete_resume)
        compute_score(complete_resume)
        assert complete_resume == before


class TestFormatComponent:
    """Each format condition is worth 5 points, no partial credit."""

    def test_email_without_at_sign(self, complete_resume):
        complete_resume["personal"]["email"] = "not-an-email"
        assert compute_score(complete_resume).details.format_score == 15

    def test_short_phone(self, complete_resume):
        complete_resume["personal"]["phone"] = "123456789"
        assert compute_score(complete_resume).details.format_score == 15

    def test_phone_length_is_raw_characters(self, complete_resume):
        complete_resume["personal"]["phone"] = "(12) 3-4567"
        assert compute_score(complete_resume).details.format_score == 20

    def test_missing_location(self, complete_resume):
        del complete_resume["personal"]["location"]
        assert compute_score(complete_resume).details.format_score == 15


class TestContentComponent:
    """Binary content conditions vs. the interpolated content detail."""

    def test_single_experience_entry_has_no_issue_and_no_points(self, complete_resume):
        long_entry = dict(complete_resume["experience"][0], description=" ".join(["shipping"] * 300))
        complete_resume["experience"] = [long_entry]

        result = compute_score(complete_resume)

        assert "Add work experience" not in result.issues
        assert result.ats_score == 67

    def test_short_summary(self, complete_resume):
        complete_resume["personal"]["summary"] = "Managed and developed things."

        result = compute_score(complete_resume)

        assert "Add a professional summary" in result.issues
        assert result.ats_score == 67

    def test_medium_length_resume_has_no_length_issue(self, empty_resume):
        empty_resume["personal"]["summary"] = " ".join(["word"] * 150)

        result = compute_score(empty_resume)

        assert "Resume too short (< 100 words)" not in result.issues
        assert result.details.content_score == pytest.approx(150 / 250 * 40)

    def test_content_detail_interpolates_while_total_does_not(self, empty_resume):
        empty_resume["personal"]["summary"] = " ".join(["word"] * 125)

        result = compute_score(empty_resume)

        # Summary > 50 chars earns 10; the word-count condition earns nothing
        assert result.ats_score == 10
        assert 0 < result.details.content_score < 40

    def test_word_count_covers_every_section(self, empty_resume):
        empty_resume["skills"] = ["alpha beta"] * 130

        result = compute_score(empty_resume)

        assert result.details.content_score == 40
        assert "Resume too short (< 100 words)" not in result.issues


class TestSkillsComponent:

    @pytest.mark.parametrize("count, awarded, detail", [
        (0, 0, 0),
        (1, 5, 2),
        (4, 5, 8),
        (5, 10, 10),
        (12, 10, 20),
    ])
    def test_awarded_and_detail_differ(self, empty_resume, count, awarded, detail):
        empty_resume["skills"] = [f"skill{i}" for i in range(count)]

        result = compute_score(empty_resume)

        assert result.details.skills_score == detail
        assert result.ats_score == awarded


class TestKeywordComponent:

    def test_all_stems_give_full_keyword_score(self, empty_resume):
        empty_resume["personal"]["summary"] = " ".join(ACTION_VERBS)

        result = compute_score(empty_resume)

        assert result.details.keyword_score == 20
        assert not any("action verbs" in issue for issue in result.issues)

    def test_no_stems_give_zero(self, complete_resume):
        complete_resume["personal"]["summary"] = "Platform engineer who ran teams and wrote tooling well"

        result = compute_score(complete_resume)

        assert result.details.keyword_score == 0
        assert "Use strong action verbs (0/6 found)" in result.issues

    def test_matching_is_case_insensitive_substring(self, empty_resume):
        empty_resume["experience"] = [{"description": "MANAGED budgets; self-improvedness"}]

        result = compute_score(empty_resume)

        assert result.details.keyword_score == pytest.approx(2 / 6 * 20)

    def test_repeated_stem_counts_once(self, empty_resume):
        empty_resume["skills"] = ["managed", "managed", "managed"]
        assert compute_score(empty_resume).details.keyword_score == pytest.approx(20 / 6)


class TestScoreBounds:

    def test_pathological_input_stays_in_range(self, complete_resume):
        complete_resume["personal"]["summary"] = "résumé 履歴書 🚀 " * 20000 + " ".join(ACTION_VERBS)
        complete_resume["skills"] = ["ünïcødé"] * 500

        result = compute_score(complete_resume)

        assert 0 <= result.ats_score <= 100
        assert result.ats_score == 90

    def test_missing_optional_fields_are_treated_as_absent(self):
        data = {
            "personal": {"email": None, "phone": None},
            "experience": [{}],
            "education": [{}],
            "skills": [],
        }

        result = compute_score(data)

        assert 0 <= result.ats_score <= 100
        assert result.details.format_score == 5


class TestMixedEntries:
    """Section sizes count raw entries; text checks see odd entries as empty."""

    def test_non_object_entries_still_count(self, empty_resume):
        empty_resume["experience"] = ["Freelance work", 42]
        empty_resume["skills"] = ["python", 7, "sql", None, "git"]

        result = compute_score(empty_resume)

        # Format 5 (has experience) + two experience entries 10 + five skills 10
        assert result.ats_score == 25
        assert result.details.skills_score == 10
        assert "Add work experience" not in result.issues
        assert "Add more skills (minimum 5 recommended)" not in result.issues

    def test_non_object_entries_need_descriptions(self, empty_resume):
        empty_resume["experience"] = ["Freelance work", {"description": "x" * 40}]

        messages = [s.msg for s in get_optimizations(empty_resume)]

        assert "Experience #1: Add detailed description" in messages
        assert "Experience #2: Add detailed description" not in messages

    def test_whole_point_details_serialize_as_integers(self, complete_resume):
        details = compute_score(complete_resume).model_dump(by_alias=True)["details"]

        assert isinstance(details["formatScore"], int)
        assert isinstance(details["skillsScore"], int)
        assert details["formatScore"] == 20
        assert details["skillsScore"] == 12


class TestStructuralValidation:

    @pytest.mark.parametrize("section", ["personal", "experience", "education", "skills"])
    def test_missing_section_raises(self, empty_resume, section):
        del empty_resume[section]
        with pytest.raises(ValidationError, match=section):
            compute_score(empty_resume)

    def test_wrong_section_type_raises(self, empty_resume):
        empty_resume["skills"] = "python, sql"
        with pytest.raises(ValidationError):
            compute_score(empty_resume)

    def test_non_mapping_payload_raises(self):
        with pytest.raises(ValidationError):
            compute_score(["not", "a", "resume"])

    def test_optimizations_validate_too(self):
        with pytest.raises(ValidationError):
            get_optimizations({"personal": {}})


class TestOptimizations:

    def test_empty_resume(self, empty_resume):
        suggestions = get_optimizations(empty_resume)

        assert [(s.level, s.msg) for s in suggestions] == [
            ("error", "Email required"),
            ("error", "First name required"),
            ("warning", "No work experience found"),
            ("warning", "Only 0 skills - add more"),
        ]

    def test_complete_resume_flags_short_description(self, complete_resume):
        suggestions = get_optimizations(complete_resume)

        assert [(s.level, s.msg) for s in suggestions] == [
            ("warning", "Experience #3: Add detailed description"),
        ]

    def test_email_alias_is_info(self, complete_resume):
        complete_resume["personal"]["email"] = "ada+jobs@b.com"

        suggestions = get_optimizations(complete_resume)

        assert any(s.level == "info" and "email" in s.msg.lower() for s in suggestions)

    def test_each_short_entry_is_tagged_with_its_position(self, empty_resume):
        empty_resume["experience"] = [
            {"description": "x" * 29},
            {"description": "x" * 30},
            {},
        ]

        messages = [s.msg for s in get_optimizations(empty_resume)]

        assert "Experience #1: Add detailed description" in messages
        assert "Experience #2: Add detailed description" not in messages
        assert "Experience #3: Add detailed description" in messages
        assert "No work experience found" not in messages
