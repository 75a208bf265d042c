from lecture_transcriber.domain import ParagraphSegmenter, TimedSegment


def test_empty_text_yields_no_paragraphs():
    segmenter = ParagraphSegmenter()

    assert segmenter.segment("") == []
    assert segmenter.segment("   \n ") == []


def test_sentences_are_laid_out_back_to_back():
    text = "Short one. This sentence is long enough to exceed the minimum floor for sure!"

    paragraphs = ParagraphSegmenter().segment(text)

    assert [p.text for p in paragraphs] == [
        "Short one.",
        "This sentence is long enough to exceed the minimum floor for sure!",
    ]
    assert paragraphs[0].start_ms == 0
    assert paragraphs[0].end_ms == 2000
    assert paragraphs[1].start_ms == 2000
    assert paragraphs[1].end_ms == 2000 + len(paragraphs[1].text) * 50


def test_splits_on_question_exclamation_and_cjk_terminators():
    paragraphs = ParagraphSegmenter().segment("Why? Because! 今日は。 はい！ Done")

    assert [p.text for p in paragraphs] == ["Why?", "Because!", "今日は。", "はい！", "Done"]


def test_punctuation_without_whitespace_does_not_split():
    paragraphs = ParagraphSegmenter().segment("Version 3.5 is out. Really")

    assert [p.text for p in paragraphs] == ["Version 3.5 is out.", "Really"]


def test_paragraphs_get_unique_ids():
    paragraphs = ParagraphSegmenter().segment("A. B. C.")

    assert len({p.id for p in paragraphs}) == 3


def test_custom_duration_settings():
    paragraphs = ParagraphSegmenter(min_duration_ms=100, ms_per_char=10).segment("Hi. Hello there.")

    assert [(p.start_ms, p.end_ms) for p in paragraphs] == [(0, 100), (100, 220)]


def test_timed_segments_use_provider_timing():
    segments = [
        TimedSegment(start=0.0, end=3.2, text=" First sentence. "),
        TimedSegment(start=3.2, end=3.5, text="Ok."),
        TimedSegment(start=4.0, end=8.0, text="  "),
        TimedSegment(start=5.0, end=9.0, text="Last."),
    ]

    paragraphs = ParagraphSegmenter().from_timed_segments(segments)

    assert [(p.text, p.start_ms, p.end_ms) for p in paragraphs] == [
        ("First sentence.", 0, 3200),
        ("Ok.", 3200, 5200),
        ("Last.", 5200, 9000),
    ]
