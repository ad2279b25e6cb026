import json

import pytest

from qcm_extract.core.config import Settings
from qcm_extract.services.conversion import convert_csv_file, convert_signs_files, extract_pdf_file


def _settings(tmp_path, **overrides):
    values = dict(
        DATA_DIR=str(tmp_path / "data"),
        PUBLIC_DATA_DIR=str(tmp_path / "public" / "data"),
        SIGNS_ASSETS_DIR=str(tmp_path / "assets" / "signs"),
        PUBLIC_SIGNS_ASSETS_DIR=str(tmp_path / "public" / "assets" / "signs"),
        SIGN_IMAGES_DIR=str(tmp_path / "sign_images_by_id"),
        PUBLIC_SIGN_IMAGES_DIR=str(tmp_path / "public" / "assets" / "sign_images_by_id"),
        PDF_USE_OCR=False,
    )
    values.update(overrides)
    return Settings(**values)


def _read(path):
    return json.loads(path.read_text(encoding="utf-8"))


def test_convert_csv_writes_outputs_and_report(tmp_path):
    s = _settings(tmp_path)
    (tmp_path / "assets" / "signs").mkdir(parents=True)
    (tmp_path / "assets" / "signs" / "1.svg").write_text("<svg/>")
    csv_path = tmp_path / "questions.csv"
    csv_path.write_text(
        "\n".join(
            [
                "ID,Cat,Type,Question Text (نص السؤال),Option 1,Option 2,Option 3,Correct Answer,Correct Answer Index,Sign Path",
                "1,G,Signs,ماذا تعني هذه الإشارة؟,خيار أ,خيار ب,خيار ج,خيار أ,1,1.svg",
                "2,B,Rules,,أ,ب,ج,أ,1,",
            ]
        ),
        encoding="utf-8",
    )

    question_set, report = convert_csv_file(csv_path, s)

    assert len(question_set.questions) == 1
    assert report.source_csv_path == str(csv_path)
    assert report.signs_assets_synced is True
    assert (tmp_path / "public" / "assets" / "signs" / "1.svg").exists()

    data = _read(tmp_path / "data" / "questions.ar.generated.json")
    public = _read(tmp_path / "public" / "data" / "questions.ar.generated.json")
    assert data == public
    assert data["questions"][0]["signPath"] == "/assets/signs/1.svg"

    written_report = _read(tmp_path / "data" / "extraction-report.json")
    assert written_report["totalRows"] == 2
    assert written_report["rowsSkipped"] == 1
    assert written_report["signsWithImageCount"] == 1
    assert written_report["signsAssetsSynced"] is True


def test_missing_csv_writes_nothing(tmp_path):
    s = _settings(tmp_path)
    with pytest.raises(FileNotFoundError):
        convert_csv_file(tmp_path / "nope.csv", s)
    assert not (tmp_path / "data").exists()


def test_convert_signs_files(tmp_path):
    s = _settings(tmp_path)
    images = tmp_path / "sign_images_by_id"
    images.mkdir()
    (images / "001.png").write_bytes(b"png")

    flashcards_csv = tmp_path / "flash.csv"
    flashcards_csv.write_text(
        "ID,Type,Name in Arabic\n1,Warning,منعطف لليمين\n2,Information,مستشفى\n,Warning,بدون رقم\n",
        encoding="utf-8",
    )
    quiz_csv = tmp_path / "quiz.csv"
    quiz_csv.write_text(
        "ID,Type,Option 1,Option 2,Option 3,Correct Answer,Index of Correct Answer\n1,Warning,أ,ب,ج,ب,2\n2,Warning,أ,ب,ج,د,\n",
        encoding="utf-8",
    )

    card_set, quiz_set, report = convert_signs_files(flashcards_csv, quiz_csv, s)

    assert [c.image_path for c in card_set.cards] == [
        "/assets/sign_images_by_id/001.png",
        "/assets/sign_images_by_id/002.svg",
    ]
    assert len(quiz_set.questions) == 1
    assert report.images_synced is True
    assert (tmp_path / "public" / "assets" / "sign_images_by_id" / "001.png").exists()

    written = _read(tmp_path / "data" / "signs-extraction-report.json")
    assert written["flashcardsTotalRows"] == 3
    assert written["flashcardsSkipped"] == 1
    assert written["quizExtracted"] == 1
    assert written["unresolvedQuizAnswers"] == 1
    assert written["missingImageCount"] == 1
    assert _read(tmp_path / "public" / "data" / "signs.quiz.ar.generated.json")["questions"][0]["optionsAr"] == ["أ", "ب", "ج"]


def test_convert_signs_requires_both_files(tmp_path):
    s = _settings(tmp_path)
    flashcards_csv = tmp_path / "flash.csv"
    flashcards_csv.write_text("ID,Type,Name in Arabic\n1,Warning,منعطف\n", encoding="utf-8")
    with pytest.raises(FileNotFoundError):
        convert_signs_files(flashcards_csv, tmp_path / "quiz.csv", s)


class _OneShotBackend:
    def has_language_pack(self, lang):
        return True

    def render_page_to_image(self, page_index, out_dir):
        return out_dir / "page.png"

    def run_ocr(self, image_path, lang):
        return "1) ما هي الإشارة الحمراء؟\nأ) توقف\nب) سرعة\n\nالإجابات\n1 أ"


def test_extract_pdf_file_with_ocr_backend(monkeypatch, tmp_path):
    from qcm_extract.ingest import pdf_questions

    pdf = tmp_path / "exam.pdf"
    pdf.write_bytes(b"%PDF-1.4")
    monkeypatch.setattr(pdf_questions, "read_text_layer", lambda path: [""])
    s = _settings(tmp_path, PDF_USE_OCR=True)

    question_set, report = extract_pdf_file(pdf, s, backend=_OneShotBackend())

    assert report.ocr_used_pages == (1,)
    assert question_set.questions[0].correct_choice_id == "A"
    written = _read(tmp_path / "data" / "extraction-report.json")
    assert written["sparseTextPages"] == [1]
    assert written["ocrUsedPages"] == [1]
    assert written["ocrFailedPages"] == []
    assert written["ocrSkippedPages"] == []
    assert written["blocksSkipped"] == 0
    assert _read(tmp_path / "public" / "data" / "questions.ar.generated.json")["questions"][0]["sourcePage"] == 1
