from singcoach.core.components.feedback import DrillType, SegmentFeedback
from singcoach.core.components.feedback.coaching import (
    build_coach_tips,
    build_segment_issues,
    build_subscores,
    find_worst_segment,
    select_next_drill,
)
from singcoach.core.models import AlignmentStatus, AlignmentWordResult


def _word(word, status):
    return AlignmentWordResult(
        ref_index=0, ref_word=word, ref_start=0.0, ref_end=0.1, status=status
    )


def _segment(index, accuracy):
    return SegmentFeedback(
        segment_index=index, text="x", start=0.0, end=1.0, word_accuracy_pct=accuracy
    )


class TestSegmentIssues:
    def test_missed_words_capped_at_four(self):
        words = [_word(f"w{i}", AlignmentStatus.MISSED) for i in range(6)]
        assert build_segment_issues(words, 0) == ["Missed w0, w1, w2, w3."]

    def test_missed_then_incorrect_then_timing(self):
        words = [
            _word("gone", AlignmentStatus.MISSED),
            _word("wrong", AlignmentStatus.INCORRECT),
        ]
        assert build_segment_issues(words, 300) == [
            "Missed gone.",
            "Incorrect words: wrong.",
            "Timing off by ~300ms.",
        ]

    def test_issue_words_are_display_cleaned(self):
        words = [_word("  over \n the", AlignmentStatus.MISSED)]
        assert build_segment_issues(words, 0) == ["Missed over the."]

    def test_encouragement_when_clean(self):
        words = [_word("ok", AlignmentStatus.CORRECT)]
        assert build_segment_issues(words, 100) == [
            "Nice line. Keep the timing consistent."
        ]


class TestCoachTips:
    def test_all_applicable_tips_are_appended(self):
        tips = build_coach_tips(50, 400, 1.3, ["alpha", "beta"], estimated_offset_ms=90)
        assert len(tips) == 3
        assert tips[0] == "Focus on the missed words: alpha, beta."
        assert "offset corrected by 90ms" in tips[1]
        assert "rushing" in tips[2]

    def test_accuracy_tip_caps_missed_words_at_five(self):
        tips = build_coach_tips(10, 0, 1.0, [f"w{i}" for i in range(8)])
        assert tips[0] == "Focus on the missed words: w0, w1, w2, w3, w4."

    def test_generic_accuracy_tip_without_missed_words(self):
        tips = build_coach_tips(60, 0, 1.0, [])
        assert tips == ["Focus on lyric accuracy - keep the words tight."]

    def test_small_offset_is_not_mentioned(self):
        tips = build_coach_tips(100, 300, 1.0, [], estimated_offset_ms=20)
        assert "offset" not in tips[0]

    def test_positive_tip_when_nothing_fires(self):
        assert build_coach_tips(95, 100, 1.0, []) == [
            "Nice take - aim for even tighter timing on the next pass."
        ]


class TestDrillSelection:
    def test_repeat_segment_targets_worst(self):
        drill = select_next_drill([_segment(0, 90), _segment(1, 40), _segment(2, 40)], 400, 1.5)
        assert drill.type == DrillType.REPEAT_SEGMENT
        assert drill.target_segment_index == 1
        assert "(2)" in drill.note

    def test_timing_lock_before_slow_down(self):
        assert select_next_drill([_segment(0, 90)], 300, 1.5).type == DrillType.TIMING_LOCK

    def test_slow_down(self):
        assert select_next_drill([_segment(0, 90)], 100, 1.2).type == DrillType.SLOW_DOWN

    def test_default_accuracy_clean(self):
        assert select_next_drill([], 0, 0.5).type == DrillType.ACCURACY_CLEAN

    def test_find_worst_segment_empty(self):
        assert find_worst_segment([]) is None


def test_subscores():
    subscores = build_subscores(104, 150, 0.9)
    assert subscores.word_accuracy == 100
    assert subscores.timing == 70
    assert subscores.pace == 80
