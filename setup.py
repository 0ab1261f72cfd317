"""Packaging for Pomodori.

Install for development:
    pip install -e .[test]

Build a macOS .app bundle (menu-bar only, no Dock icon):
    pip install py2app
    python setup.py py2app
"""

from setuptools import find_packages, setup

APP = ["main.py"]
OPTIONS = {
    "argv_emulation": False,
    "plist": {
        "CFBundleName": "Pomodori",
        "CFBundleDisplayName": "Pomodori",
        "CFBundleIdentifier": "com.pomodori.app",
        "CFBundleVersion": "0.1.0",
        "CFBundleShortVersionString": "0.1.0",
        "LSUIElement": True,
        "LSMinimumSystemVersion": "13.0",
    },
}

setup(
    app=APP,
    options={"py2app": OPTIONS},
    name="Pomodori",
    version="0.1.0",
    description="Menu-bar Pomodoro timer",
    packages=find_packages(include=["pomodori", "pomodori.*"]),
    python_requires=">=3.10",
    install_requires=[
        "PyQt6",
        "numpy",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "gui_scripts": ["pomodori = pomodori.__main__:main"],
    },
)
