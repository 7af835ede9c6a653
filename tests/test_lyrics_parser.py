"""
同步歌词解析器测试
"""

import unittest

from lyricstatus.lyrics.lyrics_parser import (
    LyricsParser,
    LyricLine,
    LyricsTimeline,
    TRAILING_LINE_DURATION_MS,
)


class TestLyricsParser(unittest.TestCase):
    """测试 LRC 文本到歌词时间轴的转换"""

    def setUp(self):
        self.parser = LyricsParser()

    def test_basic_timeline(self):
        """测试基本解析，最后一行追加5秒"""
        timeline = self.parser.parse("[00:01.50]Hello\n[00:05.00]World")

        self.assertIsInstance(timeline, LyricsTimeline)
        self.assertEqual(list(timeline), [
            LyricLine(1500, 5000, "Hello"),
            LyricLine(5000, 10000, "World"),
        ])

    def test_fraction_normalization(self):
        """测试小数部分补齐后截断为两位"""
        test_cases = [
            (("00", "00", "5"), 500),
            (("00", "00", "50"), 500),
            (("00", "00", "505"), 500),
            (("00", "00", "999"), 990),
            (("01", "02", "03"), 62030),
            (("10", "00", "00"), 600000),
        ]

        for args, expected in test_cases:
            with self.subTest(args=args):
                self.assertEqual(LyricsParser.timestamp_to_ms(*args), expected)

    def test_three_digit_fraction_in_text(self):
        """测试三位小数的时间戳"""
        timeline = self.parser.parse("[00:02.345]Three digits")
        self.assertEqual(timeline[0].start_time, 2340)
        self.assertEqual(timeline[0].end_time, 2340 + TRAILING_LINE_DURATION_MS)

    def test_empty_record_bounds_previous_line(self):
        """测试空文本记录不生成歌词行，但作为上一行的结束时间"""
        lrc = "[00:01.00]First\n[00:03.00]\n[00:08.00]Second"
        timeline = self.parser.parse(lrc)

        self.assertEqual(len(timeline), 2)
        self.assertEqual(timeline[0], LyricLine(1000, 3000, "First"))
        self.assertEqual(timeline[1], LyricLine(8000, 13000, "Second"))

    def test_whitespace_only_text_is_empty(self):
        """测试只有空白的文本视为空行"""
        timeline = self.parser.parse("[00:01.00]First\n[00:02.00]   \r")
        self.assertEqual(list(timeline), [LyricLine(1000, 2000, "First")])

    def test_non_matching_records_ignored(self):
        """测试元数据标签和普通文本被忽略，结束时间取下一个匹配记录"""
        lrc = "\n".join([
            "[ar:Artist]",
            "[ti:Title]",
            "[00:01.00]One",
            "plain text in between",
            "[00:04.00]Two",
        ])
        timeline = self.parser.parse(lrc)

        self.assertEqual(list(timeline), [
            LyricLine(1000, 4000, "One"),
            LyricLine(4000, 9000, "Two"),
        ])

    def test_text_is_trimmed(self):
        """测试歌词文本去除首尾空白"""
        timeline = self.parser.parse("[00:01.00]   padded text   \r")
        self.assertEqual(timeline[0].text, "padded text")

    def test_coinciding_timestamps_do_not_crash(self):
        """测试时间戳重合时生成零长度的行"""
        timeline = self.parser.parse("[00:01.00]A\n[00:01.00]B\n[00:03.00]C")

        self.assertEqual(timeline[0], LyricLine(1000, 1000, "A"))
        self.assertEqual(timeline[0].duration, 0)
        self.assertEqual(timeline[1], LyricLine(1000, 3000, "B"))

    def test_out_of_order_timestamps_keep_source_order(self):
        """测试时间戳倒序时保留原顺序并产生负长度的行"""
        timeline = self.parser.parse("[00:05.00]Later\n[00:02.00]Earlier")

        self.assertEqual(timeline[0], LyricLine(5000, 2000, "Later"))
        self.assertLess(timeline[0].duration, 0)

    def test_no_timeline_cases(self):
        """测试没有可用歌词时返回None"""
        for content in [None, "", "   \n  ", "no timestamps here", "[00:01.00]\n[00:02.00]  "]:
            with self.subTest(content=content):
                self.assertIsNone(self.parser.parse(content))

    def test_single_digit_minutes_not_matched(self):
        """测试分钟必须为两位数"""
        self.assertIsNone(self.parser.parse("[1:02.00]Not matched"))

    def test_format_time(self):
        """测试时间格式化"""
        self.assertEqual(LyricsParser.format_time(62030), "01:02.03")
        self.assertEqual(LyricsParser.format_time(0), "00:00.00")


class TestLyricsTimeline(unittest.TestCase):
    """测试歌词时间轴容器"""

    def test_empty_timeline_rejected(self):
        with self.assertRaises(ValueError):
            LyricsTimeline([])

    def test_sequence_behaviour(self):
        lines = [LyricLine(0, 1000, "a"), LyricLine(1000, 2000, "b")]
        timeline = LyricsTimeline(lines)

        self.assertEqual(len(timeline), 2)
        self.assertEqual(timeline[1].text, "b")
        self.assertEqual([line.text for line in timeline], ["a", "b"])
        self.assertEqual(repr(timeline), "LyricsTimeline(2 lines)")


if __name__ == '__main__':
    unittest.main()
