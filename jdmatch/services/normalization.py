"""
Skill normalization: synonym groups -> canonical skill names.

The synonym table is an immutable value built once per process and handed
to every SkillNormalizer; normalizers themselves hold no other state.
"""
from functools import lru_cache
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from jdmatch.utils.logging_config import get_logger

logger = get_logger(__name__)

# (canonical, *variations). First entry of each group is the canonical name.
DEFAULT_SKILL_GROUPS: Tuple[Tuple[str, ...], ...] = (
    # Programming languages
    ("javascript", "js", "ecmascript", "es6", "es2015", "es2020"),
    ("typescript", "ts"),
    ("python", "python3", "py"),
    ("java", "java8", "java11", "java17", "java21", "jdk", "jre"),
    ("c#", "csharp", "c-sharp", "dotnet", ".net", ".net core", "dotnet core"),
    ("c++", "cpp", "cplusplus"),
    ("go", "golang"),
    ("rust", "rust-lang"),
    ("kotlin", "kt"),
    ("swift", "ios swift"),
    ("objective-c", "objc", "objective c"),
    ("ruby", "ruby on rails", "ror", "rails"),
    ("php", "php7", "php8", "laravel", "symfony"),
    ("scala", "scala3"),
    ("r", "r-lang", "rstats"),

    # Frontend frameworks
    ("react", "reactjs", "react.js", "react js"),
    ("angular", "angularjs", "angular.js", "angular2", "angular 2"),
    ("vue", "vuejs", "vue.js", "vue3", "vue 3"),
    ("svelte", "sveltejs", "svelte.js"),
    ("nextjs", "next.js", "next js", "next"),
    ("nuxt", "nuxtjs", "nuxt.js"),
    ("jquery", "j-query"),

    # Backend frameworks
    ("nodejs", "node.js", "node js", "node"),
    ("express", "expressjs", "express.js"),
    ("nestjs", "nest.js", "nest js"),
    ("spring", "spring boot", "springboot", "spring-boot", "spring framework"),
    ("django", "django rest", "drf"),
    ("flask", "flask-restful"),
    ("fastapi", "fast api", "fast-api"),
    ("asp.net", "aspnet", "asp net", "asp.net core", "aspnet core"),

    # Databases
    ("postgresql", "postgres", "pg", "psql"),
    ("mysql", "mariadb", "maria db"),
    ("mongodb", "mongo", "mongo db"),
    ("redis", "redis cache", "redis db"),
    ("elasticsearch", "elastic search", "es", "elk"),
    ("cassandra", "apache cassandra"),
    ("dynamodb", "dynamo db", "aws dynamodb"),
    ("sql server", "mssql", "ms sql", "microsoft sql"),
    ("oracle", "oracle db", "oracledb", "oracle database"),
    ("sqlite", "sqlite3"),
    ("neo4j", "neo 4j"),
    ("couchbase", "couch base"),

    # Cloud platforms
    ("aws", "amazon web services", "amazon aws", "amazon cloud"),
    ("azure", "microsoft azure", "ms azure", "azure cloud"),
    ("gcp", "google cloud", "google cloud platform", "gcloud"),
    ("heroku", "heroku cloud"),
    ("digitalocean", "digital ocean", "do"),
    ("ibm cloud", "ibm", "bluemix"),

    # Containers & orchestration
    ("docker", "docker container", "containerization"),
    ("kubernetes", "k8s", "kube", "k8", "kubectl"),
    ("openshift", "open shift", "redhat openshift"),
    ("docker compose", "docker-compose", "compose"),
    ("helm", "helm charts"),
    ("istio", "istio service mesh"),
    ("podman", "pod man"),

    # CI/CD
    ("jenkins", "jenkins ci", "jenkinsfile"),
    ("gitlab ci", "gitlab-ci", "gitlab cicd"),
    ("github actions", "gh actions", "github-actions"),
    ("circleci", "circle ci", "circle-ci"),
    ("travis ci", "travisci", "travis"),
    ("azure devops", "azure pipelines", "ado"),
    ("teamcity", "team city"),
    ("bamboo", "atlassian bamboo"),
    ("argocd", "argo cd", "argo-cd"),

    # Infrastructure as code
    ("terraform", "tf", "hashicorp terraform"),
    ("ansible", "ansible playbook"),
    ("puppet", "puppet enterprise"),
    ("chef", "chef infra"),
    ("cloudformation", "cloud formation", "aws cloudformation", "cfn"),
    ("pulumi", "pulumi iac"),

    # Monitoring & observability
    ("prometheus", "prometheus monitoring"),
    ("grafana", "grafana dashboard"),
    ("datadog", "data dog"),
    ("new relic", "newrelic"),
    ("splunk", "splunk enterprise"),
    ("elk stack", "elastic stack"),
    ("jaeger", "jaeger tracing"),
    ("kibana", "kibana dashboard"),

    # Message queues
    ("kafka", "apache kafka", "confluent kafka"),
    ("rabbitmq", "rabbit mq", "rabbit"),
    ("sqs", "aws sqs", "amazon sqs"),
    ("activemq", "active mq", "apache activemq"),
    ("redis pub/sub", "redis pubsub", "redis queue"),

    # APIs & protocols
    ("rest", "restful", "rest api", "restful api"),
    ("graphql", "graph ql"),
    ("grpc", "g-rpc", "google rpc"),
    ("soap", "soap api", "soap services"),
    ("websocket", "websockets", "ws", "socket.io"),

    # Testing
    ("junit", "junit5", "junit4"),
    ("jest", "jestjs"),
    ("pytest", "py.test"),
    ("selenium", "selenium webdriver"),
    ("cypress", "cypress.io"),
    ("playwright", "ms playwright"),
    ("mocha", "mochajs"),
    ("testng", "test ng"),

    # Methodologies
    ("agile", "agile methodology", "agile development"),
    ("scrum", "scrum master", "scrum methodology"),
    ("kanban", "kanban board"),
    ("safe", "scaled agile", "safe framework", "scaled agile framework"),
    ("devops", "dev ops", "devops culture"),
    ("ci/cd", "cicd", "ci cd", "continuous integration", "continuous deployment"),
    ("tdd", "test driven development", "test-driven development"),
    ("bdd", "behavior driven development", "behaviour driven development"),
    ("waterfall", "waterfall methodology"),

    # Project management tools
    ("jira", "atlassian jira"),
    ("confluence", "atlassian confluence"),
    ("trello", "trello board"),
    ("asana", "asana project"),
    ("monday", "monday.com"),
    ("azure boards", "azure devops boards"),

    # Version control
    ("git", "git version control", "gitflow"),
    ("github", "git hub"),
    ("bitbucket", "bit bucket", "atlassian bitbucket"),
    ("gitlab", "git lab"),
    ("svn", "subversion", "apache subversion"),

    # Machine learning / AI
    ("tensorflow", "tensor flow", "tensorflow2"),
    ("pytorch", "py torch", "torch"),
    ("scikit-learn", "sklearn", "scikit learn"),
    ("keras", "tf keras"),
    ("opencv", "open cv", "cv2"),
    ("nlp", "natural language processing"),
    ("ml", "machine learning"),
    ("ai", "artificial intelligence"),
    ("llm", "large language model", "large language models"),

    # Data engineering
    ("spark", "apache spark", "pyspark"),
    ("hadoop", "apache hadoop", "hdfs"),
    ("airflow", "apache airflow"),
    ("dbt", "data build tool"),
    ("snowflake", "snowflake db"),
    ("databricks", "data bricks"),
    ("etl", "extract transform load"),

    # Security
    ("oauth", "oauth2", "oauth 2.0"),
    ("jwt", "json web token", "json web tokens"),
    ("ssl/tls", "ssl", "tls", "https"),
    ("owasp", "owasp top 10"),
    ("penetration testing", "pen testing", "pentesting"),
    ("sso", "single sign on", "single sign-on"),

    # Architecture
    ("microservices", "micro services", "micro-services", "microservice architecture"),
    ("serverless", "faas", "function as a service"),
    ("event-driven", "event driven", "eda", "event-driven architecture"),
    ("soa", "service oriented architecture"),
    ("domain-driven design", "ddd", "domain driven design"),
    ("clean architecture", "hexagonal architecture", "ports and adapters"),
)


class SynonymTable:
    """Read-only variant -> canonical mapping built from synonym groups."""

    def __init__(self, groups: Iterable[Sequence[str]]):
        canonical_groups: Dict[str, List[str]] = {}
        mapping: Dict[str, str] = {}

        for group in groups:
            members = [g.strip().lower() for g in group if g and g.strip()]
            if not members:
                continue
            canonical = members[0]
            canonical_groups.setdefault(canonical, [])
            for member in members:
                if member not in canonical_groups[canonical]:
                    canonical_groups[canonical].append(member)

        # Canonical names always map to themselves
        for canonical in canonical_groups:
            mapping[canonical] = canonical

        for canonical, members in canonical_groups.items():
            for variant in members[1:]:
                existing = mapping.get(variant)
                if existing is None:
                    mapping[variant] = canonical
                elif existing != canonical:
                    logger.debug(f"Synonym '{variant}' already maps to '{existing}', ignoring '{canonical}'")

        self._mapping: Mapping[str, str] = MappingProxyType(mapping)
        self._groups: Mapping[str, Tuple[str, ...]] = MappingProxyType(
            {k: tuple(v) for k, v in canonical_groups.items()}
        )

    def lookup(self, token: str) -> Optional[str]:
        return self._mapping.get(token)

    def variations(self, canonical: str) -> Tuple[str, ...]:
        return self._groups.get(canonical, ())

    @property
    def canonical_count(self) -> int:
        return len(self._groups)

    def __len__(self) -> int:
        return len(self._mapping)

    def __contains__(self, token: str) -> bool:
        return token in self._mapping


@lru_cache(maxsize=1)
def default_table() -> SynonymTable:
    """The process-wide table built from DEFAULT_SKILL_GROUPS."""
    table = SynonymTable(DEFAULT_SKILL_GROUPS)
    logger.info(f"Skill normalization initialized with {table.canonical_count} canonical skills and {len(table)} total mappings")
    return table


class SkillNormalizer:
    """Maps raw skill tokens to their canonical spelling."""

    def __init__(self, table: SynonymTable = None):
        self.table = table if table is not None else default_table()

    def normalize(self, token: Optional[str]) -> Optional[str]:
        if token is None or not token.strip():
            return token
        lowered = token.strip().lower()
        return self.table.lookup(lowered) or lowered

    def normalize_all(self, tokens: Optional[Iterable[str]]) -> List[str]:
        """Distinct canonical tokens in first-seen order; blanks are dropped."""
        if not tokens:
            return []
        seen = set()
        out = []
        for token in tokens:
            if token is None or not str(token).strip():
                continue
            canonical = self.normalize(str(token))
            if canonical not in seen:
                seen.add(canonical)
                out.append(canonical)
        return out

    def variations(self, canonical: str) -> List[str]:
        """All known spellings for a canonical skill (itself when unknown)."""
        key = canonical.strip().lower()
        found = self.table.variations(key)
        return list(found) if found else [canonical]

    def equivalent(self, a: str, b: str) -> bool:
        if a is None or b is None:
            return a is b
        return self.normalize(a) == self.normalize(b)
