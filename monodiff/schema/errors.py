class MonodiffError(Exception):
    """monodiffの全ての致命的エラーの基底クラス(cli.mainだけがcatchして終了する)"""


class ArgumentError(MonodiffError):
    """引数エラー(--from未指定、rootが解決できない)"""


class GitDiffError(MonodiffError):
    """git diff の実行失敗(未知のrefを含む)"""

    def __init__(self, command: list[str], output: str, returncode: int | None = None):
        self.command = command
        self.output = output
        self.returncode = returncode
        message = f"git diff failed: {' '.join(command)}"
        if returncode is not None:
            message += f" (exit status {returncode})"
        if output.strip():
            message += f"\n{output.strip()}"
        super().__init__(message)


class TraversalError(MonodiffError):
    """ワークスペース走査中のファイルシステムエラー(権限、消えたディレクトリなど)"""

    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__(f"failed to traverse {path}: {reason}")


class ManifestError(MonodiffError):
    """読めない、または不正なマニフェスト"""

    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__(f"invalid manifest {path}: {reason}")


class DuplicatePackageError(ManifestError):
    """同じパッケージ名を宣言するマニフェストが2つ以上ある"""

    def __init__(self, name: str, path1: str, path2: str):
        self.name = name
        # どちらが先に見つかったかは並列解析の順序次第なのでソートして表示する
        self.paths = sorted([path1, path2])
        super().__init__(self.paths[1], f'package name "{name}" is also declared by {self.paths[0]}')


class ConfigError(MonodiffError):
    """環境変数(.env)の設定値が不正"""

    def __init__(self, key: str, value: str, reason: str):
        self.key = key
        self.value = value
        super().__init__(f"invalid setting {key}={value!r}: {reason}")
