import os

from monodiff.schema.errors import ManifestError


class FileUtil:
    @staticmethod
    def read_file(file_path: str) -> str:
        """ファイルを読み込む(読めない場合はManifestError)"""
        try:
            with open(file_path, encoding="utf-8") as file:
                return file.read()
        except (OSError, UnicodeDecodeError) as e:
            raise ManifestError(file_path, f"cannot read file: {e}") from e

    @staticmethod
    def normalize_rel_path(path: str) -> str:
        """リポジトリルートからの相対パスを正規化する

        区切り文字の連続と "." を畳み込み、末尾の区切り文字を取り除く。
        シンボリックリンクは辿らない。ルート自身は空文字になる。
        """
        path = path.strip()
        if not path:
            return ""
        normalized = os.path.normpath(path)
        if normalized == os.curdir:
            return ""
        return normalized

    @staticmethod
    def to_rel_dir(root: str, file_path: str) -> str:
        """file_pathを含むディレクトリのroot相対パス(ルートなら空文字)"""
        rel_dir = os.path.relpath(os.path.dirname(file_path), root)
        return FileUtil.normalize_rel_path(rel_dir)

    @staticmethod
    def is_under(path: str, dir_path: str) -> bool:
        """pathがdir_pathそのもの、またはdir_path配下ならTrue(dir_pathが空文字ならルート扱いで常にTrue)"""
        if not dir_path:
            return True
        return path == dir_path or path.startswith(dir_path + os.sep)

    @staticmethod
    def base_name(path: str) -> str:
        return os.path.basename(os.path.normpath(path))
