"""Basic package import smoke tests."""


def test_package_imports() -> None:
    """Ensure the top-level package metadata is importable."""
    import git_stages  # noqa: PLC0415

    assert hasattr(git_stages, "__all__")


def test_entry_point_imports() -> None:
    from git_stages.__main__ import main  # noqa: PLC0415

    assert callable(main)
