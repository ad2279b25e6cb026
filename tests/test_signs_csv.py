from qcm_extract.ingest.signs_csv import (
    build_placeholder_image_path,
    map_flashcards_csv,
    map_quiz_csv,
    resolve_image_path_for_source_id,
)

FLASHCARDS_HEADER = "ID,Type,Name in Arabic,Name in French,Name in English"
QUIZ_HEADER = "ID,Type,Option 1,Option 2,Option 3,Correct Answer,Index of Correct Answer"


def _only(*names):
    return lambda path: path.name in names


def test_flashcards_from_arabic_names_and_type():
    csv = "\n".join(
        [
            FLASHCARDS_HEADER,
            "1,Warning,منعطف لليمين,Virage à droite,Right-Hand Bend",
            "2,Information,مستشفى,Hôpital,Hospital",
        ]
    )
    card_set, report = map_flashcards_csv(csv, exists_at=_only("001.png"))

    assert len(card_set.cards) == 2
    first, second = card_set.cards
    assert first.id == "sf-0001"
    assert first.source_id == 1
    assert first.name_ar == "منعطف لليمين"
    assert first.image_path == "/assets/sign_images_by_id/001.png"
    assert second.type == "Information"
    assert second.image_path == "/assets/sign_images_by_id/002.svg"
    assert report.extracted == 2
    assert report.missing_image_count == 1
    assert report.skipped == 0


def test_flashcards_skip_rows_missing_basic_fields():
    csv = "\n".join(
        [
            FLASHCARDS_HEADER,
            "0,Warning,صفر,,",
            "abc,Warning,نص,,",
            "3,,بدون نوع,,",
            "4,Danger,,,",
            "5,Danger,خطر,,",
        ]
    )
    card_set, report = map_flashcards_csv(csv, exists_at=lambda p: False)
    assert [c.source_id for c in card_set.cards] == [5]
    assert card_set.cards[0].id == "sf-0005"
    assert report.total_rows == 5
    assert report.skipped == 4


def test_image_resolution_priority_order():
    both = _only("003.png", "003.svg")
    assert resolve_image_path_for_source_id(3, both, images_dir="x") == "/assets/sign_images_by_id/003.png"
    assert resolve_image_path_for_source_id(2, _only("002.svg")) == "/assets/sign_images_by_id/002.svg"
    assert resolve_image_path_for_source_id(7, lambda p: False) is None
    assert build_placeholder_image_path(7) == "/assets/sign_images_by_id/007.svg"


def test_image_resolution_against_real_directory(tmp_path):
    (tmp_path / "004.webp").write_bytes(b"")
    (tmp_path / "012.jpeg").write_bytes(b"")
    assert resolve_image_path_for_source_id(4, images_dir=tmp_path) == "/assets/sign_images_by_id/004.webp"
    assert resolve_image_path_for_source_id(12, images_dir=tmp_path) == "/assets/sign_images_by_id/012.jpeg"
    assert resolve_image_path_for_source_id(5, images_dir=tmp_path) is None


def test_quiz_index_based_correct_answer():
    quiz_set, report = map_quiz_csv("\n".join([QUIZ_HEADER, "1,Warning,أ,ب,ج,ب,2"]), exists_at=lambda p: False)

    assert len(quiz_set.questions) == 1
    q = quiz_set.questions[0]
    assert q.options == ["أ", "ب", "ج"]
    assert q.correct_option_index == 1
    assert q.correct_answer_text == "ب"
    assert q.image_path == "/assets/sign_images_by_id/001.svg"
    assert report.unresolved_answers == 0
    assert report.missing_image_count == 1


def test_quiz_text_fallback_when_index_missing():
    quiz_set, _ = map_quiz_csv("\n".join([QUIZ_HEADER, "5,Mandatory,يمين,يسار,مستقيم,يسار,"]), exists_at=lambda p: False)
    assert quiz_set.questions[0].correct_option_index == 1


def test_quiz_answer_text_defaults_to_option():
    quiz_set, _ = map_quiz_csv("\n".join([QUIZ_HEADER, "6,Mandatory,يمين,يسار,,,1"]), exists_at=_only("006.png"))
    q = quiz_set.questions[0]
    assert q.options == ["يمين", "يسار"]
    assert q.correct_answer_text == "يمين"
    assert q.image_path == "/assets/sign_images_by_id/006.png"


def test_quiz_accepts_correct_answer_index_header():
    csv = "\n".join(["ID,Type,Option 1,Option 2,Option 3,Correct Answer,Correct Answer Index", "8,Warning,أ,ب,ج,,3"])
    quiz_set, _ = map_quiz_csv(csv, exists_at=lambda p: False)
    assert quiz_set.questions[0].correct_option_index == 2


def test_quiz_skipped_and_unresolved_counted_separately():
    csv = "\n".join(
        [
            QUIZ_HEADER,
            "1,Warning,أ,,,أ,1",
            ",Warning,أ,ب,ج,أ,1",
            "3,Warning,أ,ب,ج,د,",
            "4,Warning,أ,ب,ج,,7",
            "5,Warning,أ,ب,ج,ج,3",
        ]
    )
    quiz_set, report = map_quiz_csv(csv, exists_at=lambda p: False)
    assert [q.source_id for q in quiz_set.questions] == [5]
    assert report.total_rows == 5
    assert report.skipped == 2
    assert report.unresolved_answers == 2
    for q in quiz_set.questions:
        assert 0 <= q.correct_option_index < len(q.options)


def test_quiz_index_columns_tried_in_turn():
    csv = "\n".join(
        [
            "ID,Type,Option 1,Option 2,Option 3,Correct Answer,Index of Correct Answer,Correct Answer Index",
            "9,Warning,أ,ب,ج,,غير معروف,2",
            "10,Warning,أ,ب,ج,,9,3",
        ]
    )
    quiz_set, report = map_quiz_csv(csv, exists_at=lambda p: False)
    assert [q.correct_option_index for q in quiz_set.questions] == [1, 2]
    assert report.unresolved_answers == 0
