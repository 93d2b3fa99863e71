"""OAuth sign-in and connect orchestration."""

from enum import Enum

import logfire
from pydantic import BaseModel

from tether.config import AuthSettings
from tether.domain.error import AuthenticationDenied, VerificationRejected
from tether.domain.model import Account
from tether.domain.repository import UnitOfWork
from tether.domain.service import (
    AccountResolver,
    AccountService,
    IdentityLinker,
    LinkedIdentity,
    VerificationPolicy,
)
from tether.domain.value import AccountId, IdentityId, OAuthAssertion


class OAuthFlow(str, Enum):
    """Which branch handled the assertion."""

    SIGN_IN = "sign_in"
    CONNECT = "connect"


class OAuthFlowState(str, Enum):
    """States of a single assertion's trip through the orchestrator."""

    START = "start"
    VERIFYING = "verifying"
    SIGN_IN = "sign_in"
    CONNECT = "connect"
    RESOLVED = "resolved"
    REJECTED = "rejected"


class OAuthOutcome(BaseModel):
    """Terminal result of a resolved assertion."""

    state: OAuthFlowState
    flow: OAuthFlow
    account: Account
    identity_id: IdentityId
    created: bool


class OAuthOrchestrator:
    """Runs an inbound assertion through verification and one of two flows.

    start -> verifying -> {sign_in | connect} -> resolved | rejected

    Sign-in resolves (or provisions) an account and links the identity to
    it. Connect links the identity to the already-authenticated account and
    refreshes allow-listed profile fields. Verification failures are rejected
    before anything is written, and each flow's writes share one transaction.
    """

    def __init__(
        self,
        verification_policy: VerificationPolicy,
        account_resolver: AccountResolver,
        identity_linker: IdentityLinker,
        account_service: AccountService,
        unit_of_work: UnitOfWork,
        auth_settings: AuthSettings,
    ) -> None:
        """Initialize orchestrator.

        Args:
            verification_policy: Per-provider verification gate
            account_resolver: Finds or creates accounts for sign-in
            identity_linker: Attaches identities to accounts
            account_service: Account domain service
            unit_of_work: Transaction boundary
            auth_settings: Authentication settings
        """
        self.verification_policy = verification_policy
        self.account_resolver = account_resolver
        self.identity_linker = identity_linker
        self.account_service = account_service
        self.unit_of_work = unit_of_work
        self.auth_settings = auth_settings

    async def run(
        self,
        assertion: OAuthAssertion,
        current_account_id: AccountId | None = None,
    ) -> OAuthOutcome:
        """Handle one assertion.

        Args:
            assertion: Assertion from a completed provider handshake
            current_account_id: Authenticated account, if the request has a session

        Returns:
            Resolved outcome

        Raises:
            VerificationRejected: If the provider does not vouch for the email
            AlreadyLinkedElsewhere: If connect conflicts under the reject policy
            UnsupportedProviderError: If the provider has no verification rule
        """
        provider = assertion.provider.value
        with logfire.span("oauth_orchestrator.run", provider=provider):
            self._transition(OAuthFlowState.START, provider)
            try:
                self._transition(OAuthFlowState.VERIFYING, provider)
                verified = self.verification_policy.verified(assertion)

                if current_account_id is not None:
                    self._transition(OAuthFlowState.CONNECT, provider)
                    outcome = await self._connect(
                        assertion, current_account_id, verified
                    )
                else:
                    self._transition(OAuthFlowState.SIGN_IN, provider)
                    outcome = await self._sign_in(assertion, verified)
            except AuthenticationDenied as e:
                self._transition(
                    OAuthFlowState.REJECTED, provider, message_key=e.message_key
                )
                raise

            self._transition(
                OAuthFlowState.RESOLVED,
                provider,
                flow=outcome.flow.value,
                account_id=str(outcome.account.id),
                created=outcome.created,
            )
            return outcome

    async def _sign_in(self, assertion: OAuthAssertion, verified: bool) -> OAuthOutcome:
        if not verified:
            raise VerificationRejected(assertion.provider.value)

        async with self.unit_of_work.transaction():
            resolved = await self.account_resolver.resolve(assertion)
            linked = await self.identity_linker.link(resolved.account, assertion)

        return self._outcome(OAuthFlow.SIGN_IN, linked, created=resolved.created)

    async def _connect(
        self,
        assertion: OAuthAssertion,
        current_account_id: AccountId,
        verified: bool,
    ) -> OAuthOutcome:
        account = await self.account_service.get_by_id(current_account_id)

        if not verified:
            allowed = self.auth_settings.allow_unverified_connect and account.confirmed
            if not allowed:
                raise VerificationRejected(assertion.provider.value)
            logfire.info(
                "Connecting unverified assertion to confirmed account",
                account_id=str(account.id),
                provider=assertion.provider.value,
            )

        async with self.unit_of_work.transaction():
            await self.identity_linker.ensure_email_unclaimed(account, assertion)
            linked = await self.identity_linker.link(
                account, assertion, update_profile=True
            )

        return self._outcome(OAuthFlow.CONNECT, linked, created=False)

    @staticmethod
    def _outcome(flow: OAuthFlow, linked: LinkedIdentity, created: bool) -> OAuthOutcome:
        return OAuthOutcome(
            state=OAuthFlowState.RESOLVED,
            flow=flow,
            account=linked.account,
            identity_id=linked.identity.id,
            created=created,
        )

    @staticmethod
    def _transition(state: OAuthFlowState, provider: str, **attributes) -> None:
        logfire.info(
            "OAuth flow state {state}",
            state=state.value,
            provider=provider,
            **attributes,
        )
