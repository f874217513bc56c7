import unittest

from digipostefs.config import DEFAULT_API_URL, STAGING_API_URL, FsConfig
from digipostefs.errors import InvalidArgumentError


class TestFsConfig(unittest.TestCase):
    def test_defaults(self) -> None:
        config = FsConfig()
        self.assertEqual(config.api_url, DEFAULT_API_URL)
        self.assertEqual(config.root, "")
        self.assertEqual(config.max_retries, 3)

    def test_validation(self) -> None:
        with self.assertRaises(InvalidArgumentError):
            FsConfig(api_url="")
        with self.assertRaises(InvalidArgumentError):
            FsConfig(timeout=0)
        with self.assertRaises(InvalidArgumentError):
            FsConfig(max_retries=-1)

    def test_from_mapping(self) -> None:
        config = FsConfig.from_mapping(
            {
                "api_url": STAGING_API_URL,
                "root": "bills",
                "timeout": "30",
                "max_retries": 5,
                "unknown": "ignored",
            }
        )
        self.assertEqual(config.api_url, STAGING_API_URL)
        self.assertEqual(config.root, "bills")
        self.assertEqual(config.timeout, 30.0)
        self.assertEqual(config.max_retries, 5)

    def test_only_api_settings_are_kept(self) -> None:
        config = FsConfig.from_mapping({"document_url": "https://secure.example.test"})

        self.assertEqual(config, FsConfig())
        self.assertFalse(hasattr(config, "document_url"))
        with self.assertRaises(TypeError):
            FsConfig(document_url="https://secure.example.test")  # type: ignore[call-arg]

    def test_from_mapping_rejects_bad_numbers(self) -> None:
        with self.assertRaises(InvalidArgumentError):
            FsConfig.from_mapping({"timeout": "soon"})


if __name__ == "__main__":
    unittest.main()
