from budgetpay.errors import ConflictError, NotFoundError, UpstreamStoreUnavailable


def test_default_detail_is_used_when_none_given():
    assert ConflictError().detail == "Already exists"
    assert str(NotFoundError()) == "Not found"
    assert UpstreamStoreUnavailable().status_code == 503


def test_explicit_detail_wins():
    err = ConflictError("Budget already exists for category: Food")
    assert err.detail == "Budget already exists for category: Food"
    assert err.status_code == 409
