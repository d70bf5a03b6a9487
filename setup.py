#!/usr/bin/env python3

from setuptools import setup
import os

directory = os.path.dirname(os.path.realpath(__file__))


if __name__ == "__main__":
    setup(
        name="atlastext",
        packages=[
            "atlastext",
            "atlastext.text",
            "atlastext.visualization",
            "atlastext.visualization.platform",
            "atlastext.visualization.platform.backends",
            "atlastext.visualization.render",
        ],
        python_requires='>3.10.0',
        version="0.1.0",
        license="MIT",
        description="Bitmap-font text rendering from a pre-baked glyph atlas",
        author="mirmik",
        author_email="mirmikns@yandex.ru",
        long_description=open(os.path.join(
            directory, "README.md"), "r", encoding="utf8").read(),
        long_description_content_type="text/markdown",
        keywords=["font", "text", "opengl"],
        classifiers=[],
        package_data={
            "atlastext": [
                "resources/shaders/*",
            ]
        },
        include_package_data=True,
        install_requires=[
            "numpy",
            "PyOpenGL>=3.1",
            "glfw>=2.5.0",
            "Pillow>=9.0",
        ],
        extras_require={
            "test": [
                "pytest",
            ],
        },
        entry_points={
            "console_scripts": [
                "atlastext-info=atlastext.__main__:main",
            ],
        },
        zip_safe=False,
    )
