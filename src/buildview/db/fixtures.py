"""Demo data for the development server, the CLI, and tests."""

from datetime import datetime, timezone

from buildview.db.memory import InMemoryStore
from buildview.models import (
    AccessToken,
    Branch,
    Broadcast,
    Build,
    Commit,
    Job,
    Membership,
    Organization,
    Permission,
    Repository,
    User,
)


def _at(hour: int, minute: int, second: int = 0) -> datetime:
    return datetime(2010, 11, 12, hour, minute, second, tzinfo=timezone.utc)


def seed_demo(store: InMemoryStore) -> InMemoryStore:
    store.put("user", User(id=1, login="svenfuchs", name="Sven Fuchs", github_id=2208, synced_at=_at(10, 0)))
    store.put("user", User(id=2, login="josevalim", name="José Valim", github_id=9582))
    store.put("organization", Organization(id=1, login="travis-ci", name="Travis CI", github_id=639823))
    store.put("membership", Membership(user_id=1, organization_id=1))

    store.put(
        "repository",
        Repository(
            id=1,
            name="minimal",
            owner_name="svenfuchs",
            owner_id=1,
            last_build_id=2,
        ),
    )
    store.put(
        "repository",
        Repository(
            id=2,
            name="enginex",
            owner_name="josevalim",
            owner_id=2,
            description="Create rails 3 engines",
            github_language="Ruby",
            last_build_id=4,
        ),
    )
    store.put(
        "repository",
        Repository(
            id=3,
            name="internal",
            owner_name="travis-ci",
            owner_id=1,
            owner_type="Organization",
            private=True,
        ),
    )

    for commit_id, sha, message, committed_at in (
        (1, "add057e66c3e1d59ef1f", "unignore Gemfile.lock", _at(11, 50)),
        (2, "62aae5f70ceee39123ef", "the commit message", _at(12, 20)),
        (3, "a0f2bc7e1d0f37f0d15a", "add README", _at(12, 55)),
    ):
        store.put(
            "commit",
            Commit(
                id=commit_id,
                repository_id=1,
                sha=sha,
                ref="refs/heads/master",
                message=message,
                compare_url=f"https://github.com/svenfuchs/minimal/compare/master...{sha[:7]}",
                committed_at=committed_at,
            ),
        )

    store.put(
        "build",
        Build(
            id=1,
            repository_id=1,
            number="1",
            state="passed",
            previous_state=None,
            started_at=_at(12, 0),
            finished_at=_at(12, 0, 10),
            duration=10,
            branch_name="master",
            commit_id=1,
        ),
    )
    store.put(
        "build",
        Build(
            id=2,
            repository_id=1,
            number="2",
            state="passed",
            previous_state="passed",
            started_at=_at(12, 30),
            finished_at=_at(12, 30, 20),
            branch_name="dev",
            commit_id=2,
        ),
    )
    store.put(
        "build",
        Build(
            id=3,
            repository_id=1,
            number="3",
            state="configured",
            previous_state="passed",
            started_at=_at(13, 0),
            branch_name="master",
            commit_id=3,
        ),
    )
    store.put("build", Build(id=4, repository_id=2, number="1", state="failed", branch_name="master"))

    job_id = 1
    for build_id, count, state in ((1, 2, "passed"), (2, 2, "passed"), (3, 4, "configured"), (4, 1, "failed")):
        build = store.tables["build"][build_id]
        for index in range(1, count + 1):
            store.put(
                "job",
                Job(
                    id=job_id,
                    build_id=build_id,
                    repository_id=build.repository_id,
                    number=f"{build.number}.{index}",
                    state=state,
                    queue="builds.linux",
                    started_at=build.started_at,
                    finished_at=build.finished_at,
                    commit_id=build.commit_id,
                    owner_id=1 if build.repository_id == 1 else 2,
                ),
            )
            job_id += 1

    store.put("branch", Branch(repository_id=1, name="master", last_build_id=3, default_branch=True))
    store.put("branch", Branch(repository_id=1, name="dev", last_build_id=2))
    store.put("branch", Branch(repository_id=2, name="master", last_build_id=4, default_branch=True))
    store.put("branch", Branch(repository_id=3, name="master", default_branch=True))

    store.put("permission", Permission(user_id=1, repository_id=1, pull=True, push=True, admin=True))
    store.put("permission", Permission(user_id=1, repository_id=3, pull=True))
    store.put("token", AccessToken(token="svenfuchs-token", user_id=1))
    store.put("token", AccessToken(token="josevalim-token", user_id=2))

    store.put("broadcast", Broadcast(id=1, message="Scheduled maintenance tonight", category="announcement"))
    store.put(
        "broadcast",
        Broadcast(id=2, message="Your trial ends soon", category="warning", recipient_type="User", recipient_id=1),
    )
    store.put(
        "broadcast",
        Broadcast(id=3, message="Old news", active=False, recipient_type="User", recipient_id=1),
    )
    return store
