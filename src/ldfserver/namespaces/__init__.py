"""Useful namespaces for use with `rdflib` code."""

import sys
from typing import Mapping, Optional

from rdflib import Namespace, Graph
from rdflib.namespace import NamespaceManager

dc = Namespace('http://purl.org/dc/elements/1.1/')
"""[Dublin Core Elements 1.1](https://www.dublincore.org/specifications/dublin-core/dcmi-terms/#section-3)"""

dcterms = Namespace('http://purl.org/dc/terms/')
"""[Dublin Core Terms](https://www.dublincore.org/specifications/dublin-core/dcmi-terms/#section-2)"""

foaf = Namespace('http://xmlns.com/foaf/0.1/')
"""[FOAF ("Friend-of-a-friend") Vocabulary](http://xmlns.com/foaf/0.1/)"""

hydra = Namespace('http://www.w3.org/ns/hydra/core#')
"""[Hydra Core Vocabulary](https://www.hydra-cg.com/spec/latest/core/)"""

owl = Namespace('http://www.w3.org/2002/07/owl#')
"""[Web Ontology Language (OWL)](https://www.w3.org/TR/owl2-syntax/)"""

rdf = Namespace('http://www.w3.org/1999/02/22-rdf-syntax-ns#')
"""[RDF](https://www.w3.org/TR/rdf11-schema/)"""

rdfs = Namespace('http://www.w3.org/2000/01/rdf-schema#')
"""[RDF Schema](https://www.w3.org/TR/rdf11-schema/)"""

schema = Namespace('https://schema.org/')
"""[Schema.org](https://schema.org/)"""

skos = Namespace('http://www.w3.org/2004/02/skos/core#')
"""[Simple Knowledge Organization System (SKOS)](https://www.w3.org/TR/skos-reference/)"""

void = Namespace('http://rdfs.org/ns/void#')
"""[Vocabulary of Interlinked Datasets (VoID)](https://www.w3.org/TR/void/)"""

xsd = Namespace('http://www.w3.org/2001/XMLSchema#')
"""[XML Schema Datatypes](https://www.w3.org/TR/xmlschema-2/#built-in-datatypes)"""


def get_manager(graph: Optional[Graph] = None, prefixes: Optional[Mapping[str, str]] = None) -> NamespaceManager:
    """Scan this module's attributes for `Namespace` objects, and bind them
    to a prefix corresponding to their attribute name defined above.

    Any additional `prefixes` (e.g., the `PREFIXES` section of the server
    configuration) are bound afterward, replacing a built-in binding for the
    same prefix."""
    if graph is None:
        graph = Graph()
    nsm = NamespaceManager(graph)
    builtins = {attr: value for attr, value in sys.modules[__name__].__dict__.items() if isinstance(value, Namespace)}
    for prefix, ns in builtins.items():
        nsm.bind(prefix, ns)
    for prefix, ns in (prefixes or {}).items():
        nsm.bind(prefix, Namespace(ns), override=True, replace=True)
    return nsm


namespace_manager = get_manager()
