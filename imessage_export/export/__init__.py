from imessage_export.export.transcript import render_transcript, safe_filename, write_transcript

__all__ = ["render_transcript", "safe_filename", "write_transcript"]
