"""
lyricstatus - 将 Spotify 正在播放歌曲的同步歌词实时显示为 Discord 自定义状态
"""

__version__ = "0.1.0"
