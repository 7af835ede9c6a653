"""监视器状态 - 进程生命周期内唯一的可变状态"""

from typing import Optional
from dataclasses import dataclass

from lyricstatus.lyrics.lyrics_parser import LyricsTimeline


@dataclass
class MonitorState:
    """
    播放追踪器持有的状态

    启动时创建，只在 tick 中修改，退出时丢弃。

    - timeline 只在 current_song_id 不为None时才可能不为None
    - current_line_index 为 -1 或当前 timeline 的有效索引
    - last_notified_text 只记录成功送达的状态文本
    """
    current_song_id: Optional[str] = None
    timeline: Optional[LyricsTimeline] = None
    current_line_index: int = -1
    last_notified_text: Optional[str] = None

    @property
    def is_tracking(self) -> bool:
        return self.current_song_id is not None

    def start_song(self, song_id: str) -> None:
        """切换到新歌曲，时间轴稍后加载"""
        self.current_song_id = song_id
        self.timeline = None
        self.current_line_index = -1

    def stop(self) -> None:
        """播放停止，回到空闲状态"""
        self.current_song_id = None
        self.timeline = None
        self.current_line_index = -1
