"""Tests for the repository inspector - output parsers and git queries."""

import subprocess

import pytest

from quickgit.executor import ProcessExecutor
from quickgit.git_wrapper import (
    BranchRecord,
    Git,
    RepositoryError,
    WorktreeRecord,
    parse_branches,
    parse_oneline_log,
    parse_remote_branches,
    parse_worktrees,
)

THREE_WORKTREES = (
    "worktree /repo/main.git\n"
    "bare\n"
    "\n"
    "worktree /repo/hotfix\n"
    "HEAD 1111111111111111111111111111111111111111\n"
    "detached\n"
    "\n"
    "worktree /repo/feature\n"
    "HEAD 2222222222222222222222222222222222222222\n"
    "branch refs/heads/feature/login\n"
)


# ============================================================================
# Parser Tests
# ============================================================================


class TestParseBranches:
    """Tests for `git branch -v` parsing."""

    def test_current_and_tracking_info(self) -> None:
        """Test the two-branch example with a current marker."""
        branches = parse_branches("* main a1b2c3 commit msg\n  dev a1b2c4 [origin/dev]")

        assert len(branches) == 2
        assert branches[0] == BranchRecord(name="main", is_current=True, remote_tracking_info="commit msg")
        assert branches[1].name == "dev"
        assert not branches[1].is_current
        assert branches[1].remote_tracking_info == "[origin/dev]"

    def test_skips_short_and_blank_lines(self) -> None:
        """Test that lines below the minimum token count are skipped."""
        branches = parse_branches("\n  lonely\n  ok abc123\n")

        assert [b.name for b in branches] == ["ok"]
        assert branches[0].remote_tracking_info is None

    def test_skips_detached_head_entry(self) -> None:
        """Test that the detached HEAD pseudo-branch is not a branch."""
        branches = parse_branches("* (HEAD detached at a1b2c3) a1b2c3 msg\n  main d4e5f6 msg")

        assert [b.name for b in branches] == ["main"]

    def test_other_worktree_marker(self) -> None:
        """Test that '+' (checked out elsewhere) is stripped from the name."""
        branches = parse_branches("+ feature a1b2c3 wip\n* main d4e5f6 msg")

        assert branches[0].name == "feature"
        assert not branches[0].is_current
        assert branches[1].is_current


class TestParseWorktrees:
    """Tests for `git worktree list --porcelain` parsing."""

    def test_three_worktrees(self) -> None:
        """Test a bare, a detached and a normal worktree."""
        worktrees = parse_worktrees(THREE_WORKTREES)

        assert worktrees == [
            WorktreeRecord(path="/repo/main.git", branch=None, commit_hash="", is_bare=True),
            WorktreeRecord(
                path="/repo/hotfix",
                branch=None,
                commit_hash="1" * 40,
                is_detached=True,
            ),
            WorktreeRecord(path="/repo/feature", branch="feature/login", commit_hash="2" * 40),
        ]

    def test_trailing_blank_line_does_not_matter(self) -> None:
        """Test that output with and without a trailing blank line parse equally."""
        assert parse_worktrees(THREE_WORKTREES) == parse_worktrees(THREE_WORKTREES + "\n")
        assert parse_worktrees(THREE_WORKTREES + "\n\n") == parse_worktrees(THREE_WORKTREES)

    def test_second_worktree_detached(self) -> None:
        """Test that a detached worktree has no branch."""
        output = (
            "worktree /repo\nHEAD aaaa\nbranch refs/heads/main\n\n"
            "worktree /repo-wt\nHEAD bbbb\ndetached\n"
        )
        worktrees = parse_worktrees(output)

        assert len(worktrees) == 2
        assert worktrees[1].branch is None
        assert worktrees[1].is_detached

    def test_unknown_lines_are_ignored(self) -> None:
        """Test forward compatibility with new porcelain fields."""
        output = "worktree /repo\nHEAD aaaa\nbranch refs/heads/main\nlocked reason\nprunable gone\n"

        worktrees = parse_worktrees(output)

        assert worktrees == [WorktreeRecord(path="/repo", branch="main", commit_hash="aaaa")]

    def test_empty_output(self) -> None:
        """Test that no output means no worktrees."""
        assert parse_worktrees("") == []


class TestSimpleParsers:
    """Tests for remote branch and log parsing."""

    def test_remote_branches_strip_origin_and_head(self) -> None:
        """Test that origin/ is stripped and HEAD pointers dropped."""
        output = "  origin/HEAD -> origin/main\n  origin/main\n  origin/feature/x\n  upstream/dev"

        assert parse_remote_branches(output) == ["main", "feature/x", "upstream/dev"]

    def test_oneline_log(self) -> None:
        """Test that log lines are split and blanks dropped."""
        assert parse_oneline_log("a1 first\n\nb2 second\n") == ["a1 first", "b2 second"]


# ============================================================================
# Git Query Tests (scripted executor)
# ============================================================================


class TestGitQueries:
    """Tests for Git methods against a scripted executor."""

    def test_is_repo(self, fake_executor) -> None:
        """Test repository detection."""
        git = Git(executor=fake_executor)
        assert not git.is_repo()

        fake_executor.ok("git rev-parse --git-dir", ".git")
        assert git.is_repo()

    def test_current_branch(self, fake_executor) -> None:
        """Test current branch lookup and its failure mode."""
        git = Git(executor=fake_executor)
        with pytest.raises(RepositoryError) as exc_info:
            git.current_branch()
        assert "not a git repository" in exc_info.value.stderr

        fake_executor.ok("git branch --show-current", "")
        assert git.current_branch() == ""

    def test_list_branches(self, fake_executor) -> None:
        """Test that list_branches parses executor output."""
        fake_executor.ok("git branch -v", "* main a1b2c3 msg\n  dev a1b2c4 [origin/dev] msg")

        branches = Git(executor=fake_executor).list_branches()

        assert [b.name for b in branches] == ["main", "dev"]

    def test_list_branches_failure_raises(self, fake_executor) -> None:
        """Test that a failing branch query surfaces as RepositoryError."""
        with pytest.raises(RepositoryError):
            Git(executor=fake_executor).list_branches()

    def test_list_worktrees_failure_raises(self, fake_executor) -> None:
        """Test that a failing worktree query surfaces as RepositoryError."""
        with pytest.raises(RepositoryError):
            Git(executor=fake_executor).list_worktrees()

    def test_change_predicates_default_to_false(self, fake_executor) -> None:
        """Test that status queries never raise outside a repository."""
        git = Git(executor=fake_executor)

        assert git.has_staged_changes() is False
        assert git.has_unstaged_changes() is False

    def test_change_predicates(self, fake_executor) -> None:
        """Test that non-empty output means changes."""
        fake_executor.ok("git status --porcelain", "?? new.txt")
        fake_executor.ok("git diff --cached --name-only", "")
        git = Git(executor=fake_executor)

        assert git.has_unstaged_changes()
        assert not git.has_staged_changes()

    def test_branch_exists(self, fake_executor) -> None:
        """Test branch existence via show-ref."""
        fake_executor.ok("git show-ref --verify --quiet refs/heads/main")
        git = Git(executor=fake_executor)

        assert git.branch_exists("main")
        assert not git.branch_exists("missing")
        assert not git.branch_exists("")

    def test_remote_branch_names(self, fake_executor) -> None:
        """Test remote branch listing."""
        fake_executor.ok("git branch -r", "  origin/HEAD -> origin/main\n  origin/main")

        assert Git(executor=fake_executor).remote_branch_names() == ["main"]

    def test_recent_commits(self, fake_executor) -> None:
        """Test that history is returned newest first, limited by count."""
        fake_executor.ok("git log --oneline -2", "b2 second\na1 first")

        git = Git(executor=fake_executor)

        assert git.recent_commit_summaries(2) == ["b2 second", "a1 first"]
        assert git.recent_commit_summaries(0) == []

    def test_recent_commits_empty_repository(self, fake_executor) -> None:
        """Test that a repository without commits yields no history, not an error."""
        fake_executor.fail("git log --oneline -10", "fatal: your current branch 'main' does not have any commits yet")
        fake_executor.ok("git rev-parse --git-dir", ".git")
        fake_executor.fail("git rev-parse --verify --quiet HEAD", "")

        assert Git(executor=fake_executor).recent_commit_summaries(10) == []

    def test_recent_commits_outside_repository_raises(self, fake_executor) -> None:
        """Test that history outside a repository is an error."""
        with pytest.raises(RepositoryError):
            Git(executor=fake_executor).recent_commit_summaries(10)

    def test_range_commits(self, fake_executor) -> None:
        """Test range preview and invalid ranges."""
        fake_executor.ok("git log --oneline a1..b2", "b2 second")
        git = Git(executor=fake_executor)

        assert git.range_commit_summaries("a1..b2") == ["b2 second"]
        with pytest.raises(RepositoryError):
            git.range_commit_summaries("nope..nada")

    def test_branch_description_roundtrip_commands(self, fake_executor) -> None:
        """Test that descriptions go through git config."""
        fake_executor.ok("git config branch.main.description", "Main line")
        fake_executor.ok("git config branch.dev.description 'Dev work'")
        git = Git(executor=fake_executor)

        assert git.branch_description("main") == "Main line"
        assert git.branch_description("other") is None
        assert git.set_branch_description("dev", "Dev work")

    def test_conflicted_paths(self, fake_executor) -> None:
        """Test that only UU/AA entries count as conflicts."""
        fake_executor.ok("git status --porcelain", "UU src/a.py\nAA src/b.py\nM  src/c.py")

        assert Git(executor=fake_executor).conflicted_paths() == ["src/a.py", "src/b.py"]

    def test_worktree_has_changes(self, fake_executor) -> None:
        """Test per-worktree status, unknown when the query fails."""
        fake_executor.ok("git -C /wt/clean status --porcelain", "")
        fake_executor.ok("git -C /wt/dirty status --porcelain", "M file")
        git = Git(executor=fake_executor)

        assert git.worktree_has_changes("/wt/clean") is False
        assert git.worktree_has_changes("/wt/dirty") is True
        assert git.worktree_has_changes("/wt/gone") is None


class TestCherryPickDetection:
    """Tests for is_cherry_pick_in_progress()."""

    def test_status_marker(self, fake_executor, tmp_path) -> None:
        """Test detection from git status text."""
        fake_executor.ok("git status", "On branch main\nYou are currently cherry-picking commit a1b2c3.")

        assert Git(executor=fake_executor, working_dir=tmp_path).is_cherry_pick_in_progress()

    def test_sequencer_directory(self, fake_executor, tmp_path) -> None:
        """Test detection from an existing sequencer directory."""
        (tmp_path / ".git" / "sequencer").mkdir(parents=True)
        fake_executor.ok("git status", "On branch main")
        fake_executor.ok("git rev-parse --git-path sequencer", ".git/sequencer")
        fake_executor.ok("git rev-parse --git-path CHERRY_PICK_HEAD", ".git/CHERRY_PICK_HEAD")

        assert Git(executor=fake_executor, working_dir=tmp_path).is_cherry_pick_in_progress()

    def test_cherry_pick_head_file(self, fake_executor, tmp_path) -> None:
        """Test detection from CHERRY_PICK_HEAD at an absolute path."""
        git_dir = tmp_path / ".git"
        git_dir.mkdir()
        (git_dir / "CHERRY_PICK_HEAD").write_text("a1b2c3\n")
        fake_executor.ok("git status", "On branch main")
        fake_executor.ok("git rev-parse --git-path sequencer", str(git_dir / "sequencer"))
        fake_executor.ok("git rev-parse --git-path CHERRY_PICK_HEAD", str(git_dir / "CHERRY_PICK_HEAD"))

        assert Git(executor=fake_executor, working_dir=tmp_path).is_cherry_pick_in_progress()

    def test_nothing_in_progress(self, fake_executor, tmp_path) -> None:
        """Test that missing state files mean no cherry-pick."""
        (tmp_path / ".git").mkdir()
        fake_executor.ok("git status", "On branch main\nnothing to commit")
        fake_executor.ok("git rev-parse --git-path sequencer", ".git/sequencer")
        fake_executor.ok("git rev-parse --git-path CHERRY_PICK_HEAD", ".git/CHERRY_PICK_HEAD")

        assert not Git(executor=fake_executor, working_dir=tmp_path).is_cherry_pick_in_progress()

    def test_outside_repository(self, fake_executor, tmp_path) -> None:
        """Test that failing queries mean no cherry-pick."""
        assert not Git(executor=fake_executor, working_dir=tmp_path).is_cherry_pick_in_progress()


# ============================================================================
# Integration Tests (require the git binary - mark as slow)
# ============================================================================


def _git(cwd, *args: str) -> None:
    subprocess.run(["git", *args], cwd=cwd, check=True, capture_output=True)


@pytest.mark.slow
class TestGitIntegration:
    """Integration tests against a real temporary repository."""

    def _init_repo(self, path) -> Git:
        _git(path, "init", "-b", "main")
        _git(path, "config", "user.email", "test@test.com")
        _git(path, "config", "user.name", "Test User")
        return Git(executor=ProcessExecutor(working_dir=path), working_dir=path)

    def test_empty_repository(self, tmp_path) -> None:
        """Test queries in a repository without commits."""
        git = self._init_repo(tmp_path)

        assert git.is_repo()
        assert git.recent_commit_summaries(10) == []
        assert not git.has_staged_changes()
        assert not git.is_cherry_pick_in_progress()

    def test_outside_repository(self, tmp_path) -> None:
        """Test that predicates stay false outside any repository."""
        git = Git(executor=ProcessExecutor(working_dir=tmp_path), working_dir=tmp_path)

        assert not git.is_repo()
        assert git.has_staged_changes() is False
        assert git.has_unstaged_changes() is False

    def test_commits_branches_and_worktrees(self, tmp_path) -> None:
        """Test branch, history and worktree queries after real commits."""
        repo = tmp_path / "repo"
        repo.mkdir()
        git = self._init_repo(repo)

        (repo / "a.txt").write_text("a")
        _git(repo, "add", "a.txt")
        assert git.has_staged_changes()
        _git(repo, "commit", "-m", "feat: first")
        _git(repo, "branch", "dev")

        assert git.current_branch() == "main"
        assert git.branch_exists("dev")
        assert {b.name for b in git.list_branches()} == {"main", "dev"}
        assert git.last_commit_subject() == "feat: first"
        assert len(git.recent_commit_summaries(10)) == 1

        assert git.set_branch_description("dev", "Development line")
        assert git.branch_description("dev") == "Development line"

        _git(repo, "worktree", "add", str(tmp_path / "wt-dev"), "dev")
        worktrees = git.list_worktrees()
        assert [wt.branch for wt in worktrees] == ["main", "dev"]
        assert git.worktree_has_changes(str(tmp_path / "wt-dev")) is False
