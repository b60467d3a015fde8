from calltape.counts import (
    AtLeast,
    AtMost,
    CountMatcher,
    Exactly,
    at_least,
    at_most,
    never,
    once,
    times,
)
from calltape.errors import (
    EmptyOrderQuery,
    OrderViolation,
    UnknownMockError,
    VerificationFailure,
)
from calltape.matchers import (
    ANY,
    ANY_ARGS,
    AnyValue,
    ArgumentMatcher,
    Capture,
    InstanceOf,
    Literal,
    Predicate,
    any_value,
    captor,
    instance_of,
    matching,
)
from calltape.mocks import Mock
from calltape.ordering import in_order
from calltape.records import InvocationRecord, Ledger, OperationId, SequenceCounter
from calltape.session import (
    MockHandle,
    Session,
    default_session,
    reset_default_session,
    verify,
    verify_no_further_interaction,
    verify_no_interaction,
    verify_no_other_interactions,
)
from calltape.verification import VerificationQuery, VerificationResult, Verifier

__all__ = [
    "ANY",
    "ANY_ARGS",
    "AnyValue",
    "ArgumentMatcher",
    "AtLeast",
    "AtMost",
    "Capture",
    "CountMatcher",
    "EmptyOrderQuery",
    "Exactly",
    "InstanceOf",
    "InvocationRecord",
    "Ledger",
    "Literal",
    "Mock",
    "MockHandle",
    "OperationId",
    "OrderViolation",
    "Predicate",
    "SequenceCounter",
    "Session",
    "UnknownMockError",
    "VerificationFailure",
    "VerificationQuery",
    "VerificationResult",
    "Verifier",
    "any_value",
    "at_least",
    "at_most",
    "captor",
    "default_session",
    "in_order",
    "instance_of",
    "matching",
    "never",
    "once",
    "reset_default_session",
    "times",
    "verify",
    "verify_no_further_interaction",
    "verify_no_interaction",
    "verify_no_other_interactions",
]
