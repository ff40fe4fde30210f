"""archbuild - AUR 包增量构建工具"""

__version__ = "0.1.0"
