from monodiff import settings
from monodiff.schema.errors import GitDiffError
from monodiff.utils.file_util import FileUtil
from monodiff.utils.log_util import log
from monodiff.utils.subprocess_util import SubprocessUtil


class GitUtil:
    @staticmethod
    def diff_command(repo_root: str, from_ref: str, to_ref: str = "HEAD") -> list[str]:
        # core.quotePath=false: 非ASCIIのパスをエスケープせずにそのまま出力させる
        return [
            settings.git_command,
            "-c",
            "core.quotePath=false",
            "-C",
            repo_root,
            "diff",
            "--name-only",
            f"{from_ref}..{to_ref}",
        ]

    @staticmethod
    def changed_files(repo_root: str, from_ref: str, to_ref: str = "HEAD") -> list[str]:
        """from_ref..to_ref の間で変更されたファイル(リポジトリルート相対、git diffの出力順)

        Raises:
            GitDiffError: gitが見つからない、または非ゼロで終了した場合(出力をメッセージに含む)
        """
        command = GitUtil.diff_command(repo_root, from_ref, to_ref)
        try:
            result = SubprocessUtil.run(command, merge_stderr=True, check=True)
        except SubprocessUtil.CalledProcessError as e:
            raise GitDiffError(command, e.stdout or "", e.returncode) from e
        except OSError as e:
            raise GitDiffError(command, str(e)) from e
        return GitUtil.parse_name_only(result.stdout)

    @staticmethod
    def parse_name_only(output: str) -> list[str]:
        """git diff --name-only の出力をパスのリストにする(空行は捨てる)"""
        changed_files = []
        for line in output.splitlines():
            path = FileUtil.normalize_rel_path(line)
            if path:
                changed_files.append(path)
        log("changed_files(len)= %d", len(changed_files))
        return changed_files
