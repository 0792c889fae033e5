"""
Unit tests for quiz PDF rendering and the markdown ZIP export.
"""

import zipfile

from pypdf import PdfReader

from curriculum_toolkit.builder.output import PdfTextWriter, render_answer_key_pdf, render_quiz_pdf, write_quiz_zip
from curriculum_toolkit.builder.output.renderer import pdf_safe
from curriculum_toolkit.core.models.questions import AnswerKeyEntry, McqQuestion
from curriculum_toolkit.core.models.selection import QuizQuestion, SelectionResult

OPTIONS = (("A", "GET"), ("B", "POST"), ("C", "PUT"), ("D", "PATCH"))


def make_selection(count: int, target: int | None = None) -> SelectionResult:
    questions = tuple(
        QuizQuestion(
            week="week-07",
            question=McqQuestion(n, f"Which HTTP method is idempotent? (variant {n})", OPTIONS, "REST", n),
            answer=AnswerKeyEntry(n, "C", "PUT replaces the whole resource." if n % 2 else "", n),
            topic="REST",
        )
        for n in range(1, count + 1)
    )
    return SelectionResult(questions=questions, target_count=target or count)


class TestPdfSafe:

    def test_arrows_and_checks_replaced(self):
        assert pdf_safe("a → b ✓") == "a -> b [x]"

    def test_unencodable_characters_become_question_marks(self):
        assert pdf_safe("λ") == "?"


class TestPdfTextWriter:

    def test_long_content_when_written_then_paginates(self, tmp_path):
        writer = PdfTextWriter(tmp_path / "long.pdf")
        writer.heading("Long")
        for i in range(120):
            writer.paragraph(f"Line {i}")
        pages = writer.save()

        assert pages > 1
        assert len(PdfReader(str(tmp_path / "long.pdf")).pages) == pages

    def test_creates_parent_directories(self, tmp_path):
        target = tmp_path / "a" / "b" / "doc.pdf"
        PdfTextWriter(target).save()
        assert target.exists()


class TestRenderQuiz:

    def test_quiz_numbers_questions_in_quiz_order(self, tmp_path):
        path = tmp_path / "quiz.pdf"
        pages = render_quiz_pdf(make_selection(3), path, title="REST Quiz")

        text = PdfReader(str(path)).pages[0].extract_text()
        assert pages == 1
        assert "REST Quiz" in text
        assert "3 questions." in text
        assert "3. Which HTTP method is idempotent? (variant 3)" in text
        assert "D) PATCH" in text
        # Source numbers stay out of the quiz
        assert "week-07" not in text

    def test_many_questions_span_pages(self, tmp_path):
        pages = render_quiz_pdf(make_selection(40), tmp_path / "quiz.pdf")
        assert pages > 1

    def test_empty_selection_still_writes_title(self, tmp_path, caplog):
        path = tmp_path / "quiz.pdf"
        pages = render_quiz_pdf(make_selection(0, target=5), path)
        assert pages == 1
        assert "Empty selection" in caplog.text


class TestRenderAnswerKey:

    def test_answer_key_shows_letter_option_and_explanation(self, tmp_path):
        path = tmp_path / "answers.pdf"
        render_answer_key_pdf(make_selection(2), path, title="REST Quiz")

        text = PdfReader(str(path)).pages[0].extract_text()
        assert "REST Quiz: Answer Key" in text
        assert "1. C) PUT" in text
        assert "week-07 Q2 | REST" in text
        assert text.count("PUT replaces the whole resource.") == 1


class TestWriteQuizZip:

    def test_zip_members_and_contents(self, tmp_path):
        path = write_quiz_zip(make_selection(2, target=3), tmp_path / "quiz.zip", title="REST Quiz")

        with zipfile.ZipFile(path) as zf:
            assert zf.namelist() == ["README.txt", "quiz.md", "answers.md"]
            readme = zf.read("README.txt").decode("utf-8")
            quiz = zf.read("quiz.md").decode("utf-8")
            answers = zf.read("answers.md").decode("utf-8")

        assert "Questions: 2 (requested 3)" in readme
        assert "2. week-07 Q2" in readme
        assert quiz.startswith("# REST Quiz\n")
        assert "**Topic:** REST" in quiz
        assert "C) PUT" in quiz
        assert answers.count("**Answer: C**") == 2

    def test_zip_without_answers(self, tmp_path):
        path = write_quiz_zip(make_selection(1), tmp_path / "quiz.zip", include_answers=False)
        with zipfile.ZipFile(path) as zf:
            assert "answers.md" not in zf.namelist()

    def test_suffix_added_when_missing(self, tmp_path):
        path = write_quiz_zip(make_selection(1), tmp_path / "export")
        assert path.name == "export.zip"
        assert path.exists()
