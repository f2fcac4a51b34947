#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Copyright 2025 Confluent Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
# http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#

import pytest

from tests.common import TestUtils
from tests.integration.cluster_fixture import ByoFixture


def kafka_cluster_fixture():
    """
    If the BROKERS environment variable is set to a CSV list of bootstrap
    servers that cluster is used, over mTLS when SSL_CA_LOCATION,
    SSL_CERTIFICATE_LOCATION and SSL_KEY_LOCATION are set as well.

    If BROKERS is not set the integration tests are skipped.
    """

    bootstraps = TestUtils.brokers()
    if bootstraps == "":
        pytest.skip("BROKERS is not set")

    tls = TestUtils.tls_kwargs()
    print("Using ByoFixture with brokers %s (%s)" % (bootstraps, "mTLS" if tls else "plaintext"))
    cluster = ByoFixture(bootstraps, tls)
    try:
        yield cluster
    finally:
        cluster.stop()


@pytest.fixture(scope="package")
def kafka_cluster():
    for fixture in kafka_cluster_fixture():
        yield fixture
