class UploadError(Exception):
    """Base class for rejected uploads; the message is shown to the client."""

class MissingUploadError(UploadError):
    def __init__(self, field: str = "file"):
        super().__init__(f'No file uploaded. Please upload an MP3 file using the "{field}" field.')

class UnsupportedMediaError(UploadError):
    def __init__(self):
        super().__init__("Only MP3 files are allowed")

class UploadTooLargeError(UploadError):
    def __init__(self, limit: int):
        super().__init__("File too large")
        self.limit = limit

class EmptyUploadError(UploadError):
    def __init__(self):
        super().__init__("Uploaded file is empty")
