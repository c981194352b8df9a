"""speaklang — speaker-labelled transcripts and English-ratio estimation."""

__version__ = "0.1.0"
