from __future__ import annotations

import logging

from github import Github, GithubException

from teamgate_core.policy import ChangeRef
from teamgate_core.reviews import Disposition, ReviewEvent

logger = logging.getLogger(__name__)

# GitHub rejects commit status descriptions longer than this.
_STATUS_DESCRIPTION_LIMIT = 140


def get_repo(repo_name: str, token: str):
    return Github(token).get_repo(repo_name)


def get_pull(repo, pr_number: int):
    return repo.get_pull(pr_number)


def get_pull_requests(repo, state: str = "open"):
    return repo.get_pulls(state=state)


def change_from_pull(pr) -> ChangeRef:
    """Describe a pull request by the branch it targets, not the one it comes from."""
    return ChangeRef(
        repo_name=pr.base.repo.full_name,
        branch_name=pr.base.ref,
        head_revision=pr.head.sha,
    )


def change_from_event(payload: dict) -> tuple[ChangeRef, int]:
    """Build a ChangeRef and PR number from a pull_request or pull_request_review webhook payload."""
    pull_request = payload.get("pull_request")
    if not pull_request:
        raise ValueError("Event payload does not contain a pull request.")
    change = ChangeRef(
        repo_name=pull_request["base"]["repo"]["full_name"],
        branch_name=pull_request["base"]["ref"],
        head_revision=pull_request["head"]["sha"],
    )
    return change, pull_request["number"]


def get_review_events(pr) -> list[ReviewEvent]:
    """Return the submitted reviews of a PR as ReviewEvents ordered by (submitted_at, id).

    Pending reviews are drafts only their author can see and carry no
    submission time; reviews by deleted accounts have no user. Both are skipped.
    """
    events = []
    for review in pr.get_reviews():
        if review.state == Disposition.PENDING.value or review.submitted_at is None:
            continue
        if review.user is None:
            logger.debug("Skipping review %s with no user", review.id)
            continue
        try:
            disposition = Disposition(review.state)
        except ValueError:
            # Unrecognised states never count as approval.
            logger.debug("Treating review %s with state %r as a comment", review.id, review.state)
            disposition = Disposition.COMMENTED
        events.append(
            ReviewEvent(
                reviewer_id=review.user.login,
                disposition=disposition,
                sequence=(review.submitted_at, review.id),
            )
        )
    return events


def get_team_members(gh, org: str, team_slug: str) -> set[str] | None:
    """Return the logins of a team's members, or None if the team does not exist."""
    try:
        team = gh.get_organization(org).get_team_by_slug(team_slug)
        members = {member.login for member in team.get_members()}
    except GithubException as e:
        if e.status == 404:
            logger.warning("Team %s/%s not found", org, team_slug)
            return None
        raise
    logger.debug("Team %s/%s has %d member(s)", org, team_slug, len(members))
    return members


def post_check_run(repo, head_sha: str, name: str, report) -> None:
    repo.create_check_run(
        name=name,
        head_sha=head_sha,
        status="completed",
        conclusion=report.conclusion,
        output={"title": report.title, "summary": report.summary},
    )


def post_commit_status(repo, head_sha: str, context: str, report) -> None:
    """Post the report as a commit status — works with tokens that cannot create check runs."""
    description = report.title
    if len(description) > _STATUS_DESCRIPTION_LIMIT:
        description = description[: _STATUS_DESCRIPTION_LIMIT - 3] + "..."
    repo.get_commit(head_sha).create_status(
        state=report.conclusion,
        description=description,
        context=context,
    )
