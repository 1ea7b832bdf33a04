from setuptools import setup, find_packages

setup(
    name="kangkang-ai",
    version="1.0.0",
    packages=find_packages(),
    install_requires=[
        "openai>=1.0.0",
        "httpx>=0.23.0",
        "python-dotenv>=0.19.0",
        "cryptography>=41.0.0",
        "pypinyin>=0.49.0",
    ],
    extras_require={
        "gui": [
            "PySide6>=6.5.0",
            "pynput>=1.7.6",
            "pyperclip>=1.8.2",
        ],
        "test": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
        ],
    },
    description="剪贴板中越互译弹窗，汉字上方标注拼音",
    long_description=open("README.md", encoding="utf-8").read(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
    python_requires=">=3.8",
)
