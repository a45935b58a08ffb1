"""Unit tests for requirement extraction."""

from docwatch.application.dto.diff_result import ChunkType, DiffChunk, RequirementCategory
from docwatch.infrastructure.diff.requirements import (
    RequirementExtractor,
    detect_procedural_document,
    extract_applies_to,
    split_sentences,
)


def test_split_sentences() -> None:
    assert split_sentences("Do this. Then that! Ok?") == ["Do this.", "Then that!", "Ok?"]


class TestCategorize:
    """First matching category wins."""

    def setup_method(self) -> None:
        self.extractor = RequirementExtractor()

    def test_step(self) -> None:
        assert self.extractor.categorize("Step 3: open the training portal") == RequirementCategory.STEP

    def test_training(self) -> None:
        assert (
            self.extractor.categorize("All staff must complete training.")
            == RequirementCategory.TRAINING
        )

    def test_storage(self) -> None:
        assert (
            self.extractor.categorize("Records must be stored in the archive.")
            == RequirementCategory.STORAGE
        )

    def test_system(self) -> None:
        assert self.extractor.categorize("Use the CRM system daily.") == RequirementCategory.SYSTEM

    def test_responsibility(self) -> None:
        assert (
            self.extractor.categorize("Supervisors are responsible for approvals.")
            == RequirementCategory.RESPONSIBILITY
        )

    def test_obligation(self) -> None:
        assert (
            self.extractor.categorize("Employees must wear badges.")
            == RequirementCategory.OBLIGATION
        )


class TestAppliesTo:
    def test_facing_role(self) -> None:
        assert extract_applies_to("Warehouse staff must sign in.") == "Warehouse staff"

    def test_assigned_to(self) -> None:
        assert extract_applies_to("Tasks are assigned to shift leads daily.") == "shift leads"

    def test_bare_role(self) -> None:
        assert extract_applies_to("Supervisors approve each request.") == "Supervisors"

    def test_no_role(self) -> None:
        assert extract_applies_to("Badges must be visible.") is None


class TestProceduralDetection:
    def test_by_file_name(self) -> None:
        assert detect_procedural_document("Onboarding SOP.docx", "text")

    def test_by_step_marker(self) -> None:
        assert detect_procedural_document("notes.txt", "Step 1 do the thing")

    def test_by_numbered_line(self) -> None:
        assert detect_procedural_document("notes.txt", "Intro\n1. Open the app")

    def test_plain_document(self) -> None:
        assert not detect_procedural_document("notes.txt", "plain text only")


class TestExtract:
    def test_modified_chunk_keeps_only_new_sentences(self) -> None:
        chunk = DiffChunk(
            type=ChunkType.MODIFIED,
            before="You must sign in.",
            after="You must sign in. You must also wear a badge.",
            location="Security",
        )
        requirements = RequirementExtractor().extract([chunk])
        assert [r.text for r in requirements] == ["You must also wear a badge."]
        assert requirements[0].category == RequirementCategory.OBLIGATION
        assert requirements[0].location == "Security"
        assert requirements[0].is_new

    def test_added_chunk_without_obligations_yields_nothing(self) -> None:
        chunk = DiffChunk(type=ChunkType.ADDED, before=None, after="Lunch is at noon.", location=None)
        assert RequirementExtractor().extract([chunk]) == []

    def test_removed_chunks_are_ignored(self) -> None:
        chunk = DiffChunk(
            type=ChunkType.REMOVED, before="You must sign in.", after=None, location=None
        )
        assert RequirementExtractor().extract([chunk]) == []

    def test_keywords_match_regardless_of_case(self) -> None:
        assert RequirementExtractor().is_requirement_sentence("Drafts live in sharepoint now.")
