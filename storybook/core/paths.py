import os


def get_project_root() -> str:
    """Absolute path of the project root (the directory holding the storybook package)."""
    package_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    return os.path.dirname(package_dir)


def get_upload_dir() -> str:
    """Absolute path of the local upload directory.
    - UPLOAD_DIRECTORY from settings/env wins when set.
    - Otherwise data/uploads under the project root.
    The directory is created if missing.
    """
    from storybook.core.config import settings

    env_dir = settings.UPLOAD_DIRECTORY or os.getenv("UPLOAD_DIRECTORY")
    if env_dir:
        os.makedirs(env_dir, exist_ok=True)
        return env_dir

    uploads = os.path.join(get_project_root(), "data", "uploads")
    os.makedirs(uploads, exist_ok=True)
    return uploads
