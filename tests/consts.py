"""Constants shared by the test suite."""

TEST_BUCKET_NAME = "some-bucket"
TEST_REGION = "us-east-1"
TEST_ACCESS_KEY_ID = "testing"
TEST_SECRET_ACCESS_KEY = "testing"

# fixed clock so generated keys are predictable
TEST_TIMESTAMP_MS = 1700000000000

TEST_FILE_CONTENT = b"Hello, world!"
TEST_PDF_CONTENT = b"%PDF-1.4\n1 0 obj\n<<>>\nendobj\ntrailer\n<</Root 1 0 R>>\n%%EOF"
TEST_PNG_CONTENT = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32
