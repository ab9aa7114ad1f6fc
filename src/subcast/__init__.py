"""subcast: media to subtitles, with remote transcription and translation."""

__version__ = "0.1.0"
