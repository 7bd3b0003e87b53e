"""Speech-to-text and text-to-speech modules."""


# Lazy imports so the Google Cloud clients load only when speech is used
def __getattr__(name):
    if name == "GoogleSpeechRecognizer":
        from .stt import GoogleSpeechRecognizer
        return GoogleSpeechRecognizer
    if name == "GoogleSpeechSynthesizer":
        from .tts import GoogleSpeechSynthesizer
        return GoogleSpeechSynthesizer
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")


__all__ = ["GoogleSpeechRecognizer", "GoogleSpeechSynthesizer"]
